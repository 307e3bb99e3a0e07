"""
File: socialconnect/db/repositories/base.py
Description: 通用异步 Repository 基类 (CRUD + 分页 + 计数器)

特性：
- 泛型支持: BaseRepository[ModelType, CreateSchemaType, UpdateSchemaType]
- 纯异步: 基于 sqlalchemy.ext.asyncio
- update 自动过滤系统字段 (id, created_at, updated_at)
- paginate: 对任意 Select 语句执行 count + offset/limit
- increment / decrement: 单条原子 UPDATE 修改冗余计数器，递减下限为 0
- 只 flush 不 commit，事务边界由 Service 层控制
"""

from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel
from sqlalchemy import Select, case, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from socialconnect.db.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


class BaseRepository(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """
    通用 CRUD 仓储基类。

    参数:
    - ModelType: SQLAlchemy 模型类 (如 Post)
    - CreateSchemaType: 创建数据的 Pydantic 模型
    - UpdateSchemaType: 更新数据的 Pydantic 模型
    """

    PROTECTED_FIELDS: ClassVar[set[str]] = {"id", "created_at", "updated_at"}

    def __init__(self, model: type[ModelType], session: AsyncSession):
        self.model = model
        self.session = session

    # --------------------------------------------------------------------------
    # 查询操作 (Read)
    # --------------------------------------------------------------------------

    async def get(self, id: Any) -> ModelType | None:
        """根据主键 ID 查询单条记录 (包含已软删除的记录)"""
        return await self.session.get(self.model, id)

    async def get_active(self, id: Any) -> ModelType | None:
        """根据主键 ID 查询有效记录，软删除视为不存在"""
        obj = await self.get(id)
        if obj is None or not getattr(obj, "is_active", True):
            return None
        return obj

    async def paginate(
        self, stmt: Select[Any], *, page: int, limit: int
    ) -> tuple[list[ModelType], int]:
        """
        分页执行查询。

        Args:
            stmt: 已包含过滤与排序条件的 select(Model) 语句
            page: 页码 (从 1 开始)
            limit: 每页条数

        Returns:
            (当前页记录, 总记录数)
        """
        count_stmt = select(func.count()).select_from(
            stmt.order_by(None).subquery()
        )
        total = (await self.session.execute(count_stmt)).scalar() or 0

        result = await self.session.execute(
            stmt.offset((page - 1) * limit).limit(limit)
        )
        return list(result.scalars().all()), total

    # --------------------------------------------------------------------------
    # 写入操作 (Create / Update / Delete)
    # --------------------------------------------------------------------------

    async def create(self, obj_in: CreateSchemaType | dict[str, Any]) -> ModelType:
        """
        创建新记录。
        flush 以获取 ID，但不 commit。
        """
        if isinstance(obj_in, dict):
            obj_in_data = obj_in
        else:
            obj_in_data = obj_in.model_dump(exclude_unset=True)
        db_obj = self.model(**obj_in_data)

        self.session.add(db_obj)
        await self.session.flush()
        await self.session.refresh(db_obj)

        return db_obj

    async def update(
        self, db_obj: ModelType, obj_in: UpdateSchemaType | dict[str, Any]
    ) -> ModelType:
        """
        更新现有记录，自动过滤 PROTECTED_FIELDS。
        """
        if isinstance(obj_in, dict):
            update_data = obj_in
        else:
            update_data = obj_in.model_dump(exclude_unset=True)

        safe_data = {
            k: v for k, v in update_data.items() if k not in self.PROTECTED_FIELDS
        }
        db_obj.update(**safe_data)  # type: ignore[attr-defined]

        self.session.add(db_obj)
        await self.session.flush()
        await self.session.refresh(db_obj)

        return db_obj

    async def deactivate(self, db_obj: ModelType) -> ModelType:
        """软删除 (LifecycleMixin)"""
        db_obj.deactivate()  # type: ignore[attr-defined]
        self.session.add(db_obj)
        await self.session.flush()
        return db_obj

    # --------------------------------------------------------------------------
    # 冗余计数器 (原子操作)
    # --------------------------------------------------------------------------

    async def increment(self, id: Any, column: str, amount: int = 1) -> None:
        """UPDATE ... SET column = column + amount"""
        col = getattr(self.model, column)
        await self.session.execute(
            update(self.model)
            .where(self.model.id == id)  # type: ignore[attr-defined]
            .values({column: col + amount})
            .execution_options(synchronize_session=False)
        )

    async def decrement(self, id: Any, column: str) -> None:
        """UPDATE ... SET column = CASE WHEN column > 0 THEN column - 1 ELSE 0 END"""
        col = getattr(self.model, column)
        await self.session.execute(
            update(self.model)
            .where(self.model.id == id)  # type: ignore[attr-defined]
            .values({column: case((col > 0, col - 1), else_=0)})
            .execution_options(synchronize_session=False)
        )
