"""
File: socialconnect/api_router.py
Description: 根 API 路由聚合层

1. 聚合所有业务领域的 Router (auth, users, posts, comments, likes)
2. 统一设置路由前缀与 OpenAPI 标签
"""

from fastapi import APIRouter

from socialconnect.domains.auth.router import router as auth_router
from socialconnect.domains.comments.router import router as comments_router
from socialconnect.domains.likes.router import router as likes_router
from socialconnect.domains.posts.router import router as posts_router
from socialconnect.domains.users.router import router as users_router

api_router = APIRouter()

# ------------------------------------------------------------------------------
# 注册领域路由
# ------------------------------------------------------------------------------

api_router.include_router(auth_router, prefix="/auth", tags=["auth"])
api_router.include_router(users_router, prefix="/users", tags=["users"])
api_router.include_router(posts_router, prefix="/posts", tags=["posts"])
api_router.include_router(comments_router, prefix="/comments", tags=["comments"])
api_router.include_router(likes_router, prefix="/likes", tags=["likes"])
