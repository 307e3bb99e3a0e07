"""
File: socialconnect/utils/masking.py
Description: PII 数据脱敏工具 (Data Masking)

本模块用于日志记录与校验错误回显时的隐私保护：
1. mask_email: 邮箱脱敏，用于账号相关日志
2. mask_sensitive_data: 递归遍历字典/列表，掩盖密码、Token 等敏感 Key
3. mask_field_value: 按字段名决定是否掩盖单个值 (校验错误的 value 回显)
"""

from typing import Any

# ==============================================================================
# 1. 敏感字段黑名单 (大小写不敏感，同时覆盖 snake_case 与 camelCase 写法)
# ==============================================================================
SENSITIVE_KEYS = {
    "password",
    "currentpassword",
    "current_password",
    "newpassword",
    "new_password",
    "confirmpassword",
    "confirm_password",
    "secret",
    "token",
    "accesstoken",
    "access_token",
    "refreshtoken",
    "refresh_token",
    "client_secret",
    "code",
}

# ==============================================================================
# 2. 基础脱敏函数
# ==============================================================================


def mask_email(email: str | None) -> str:
    """
    邮箱脱敏。
    规则: 保留用户名首位和域名，中间掩盖。
    示例: maria@example.com -> m***@example.com
    """
    if not email or "@" not in email:
        return "******"

    user_part, domain_part = email.split("@", 1)
    if len(user_part) <= 1:
        masked_user = "*" * 4
    else:
        masked_user = f"{user_part[0]}***"
    return f"{masked_user}@{domain_part}"


def mask_secret(value: Any) -> str:
    """通用机密信息完全掩盖 (密码、Token)。"""
    if value is None:
        return ""
    return "******"


def is_sensitive_key(key: Any) -> bool:
    return isinstance(key, str) and key.lower() in SENSITIVE_KEYS


def mask_field_value(field: str, value: Any) -> Any:
    """敏感字段返回掩码，其余原样返回。"""
    if is_sensitive_key(field):
        return mask_secret(value)
    return value


# ==============================================================================
# 3. 递归脱敏工具
# ==============================================================================


def mask_sensitive_data(data: Any) -> Any:
    """
    递归遍历数据结构（字典、列表），自动对敏感字段进行脱敏。

    返回浅拷贝副本，不修改原数据。
    """
    if isinstance(data, dict):
        return {
            k: mask_secret(v) if is_sensitive_key(k) else mask_sensitive_data(v)
            for k, v in data.items()
        }

    if isinstance(data, list):
        return [mask_sensitive_data(item) for item in data]

    return data
