from typing import Any, ClassVar, Iterable, Optional, cast

from tastebuddy.database.db_manager import DBManager


class BaseModel:
    table: ClassVar[str]
    pk: ClassVar[str] = 'id'

    @classmethod
    def get_many(
        cls,
        where: str = '',
        params: Iterable[Any] = (),
        order_by: str = '',
        limit: Optional[int] = None,
        columns: str = '*',
    ) -> list[dict[str, Any]]:
        query_parts: list[str] = [f'SELECT {columns} FROM {cls.table}']
        parameters: tuple[Any, ...] = tuple(params)

        if where:
            query_parts.append(f'WHERE {where}')
        if order_by:
            query_parts.append(f'ORDER BY {order_by}')
        if limit is not None:
            query_parts.append('LIMIT %s')
            parameters = (*parameters, limit)

        with DBManager() as db:
            rows = db.fetchall(' '.join(query_parts), parameters)
        return cast(list[dict[str, Any]], rows)

    @classmethod
    def create(cls, values: dict[str, Any]) -> dict[str, Any]:
        cols = list(values.keys())
        placeholders = ', '.join(['%s'] * len(cols))
        col_list = ', '.join(cols)
        sql_query = (
            f'INSERT INTO {cls.table} ({col_list}) VALUES ({placeholders}) RETURNING *'
        )
        with DBManager() as db:
            rows = db.fetchall(sql_query, tuple(values[c] for c in cols))
        return cast(dict[str, Any], rows[0]) if rows else {}
