"""Base repository with common CRUD operations"""
import logging
from typing import Generic, TypeVar, Type, Optional, List, Dict, Any, Iterable

import httpx
from postgrest.exceptions import APIError
from pydantic import BaseModel
from supabase import Client

from notebook.errors import DuplicateError, StoreError

logger = logging.getLogger(__name__)

T = TypeVar('T', bound=BaseModel)
CreateT = TypeVar('CreateT', bound=BaseModel)
UpdateT = TypeVar('UpdateT', bound=BaseModel)

# PostgreSQL unique_violation
UNIQUE_VIOLATION = "23505"


class BaseRepository(Generic[T, CreateT, UpdateT]):
    """
    Base repository providing common database operations.
    Hides Supabase implementation details from the rest of the application.
    
    PostgREST and transport failures are translated into the notebook error
    taxonomy: unique violations become DuplicateError, everything else StoreError.
    """
    
    def __init__(self, client: Client, table_name: str, model_class: Type[T]):
        self._client = client
        self._table_name = table_name
        self._model_class = model_class
    
    def _to_model(self, data: Dict[str, Any]) -> T:
        """Convert database dict to domain model"""
        return self._model_class(**data)
    
    def _to_models(self, data: List[Dict[str, Any]]) -> List[T]:
        """Convert list of database dicts to domain models"""
        return [self._to_model(item) for item in data]
    
    def _execute(self, query, step: str):
        """Run a query builder, translating store failures"""
        try:
            return query.execute()
        except APIError as e:
            if e.code == UNIQUE_VIOLATION:
                raise DuplicateError(f"{self._table_name}: row already exists") from e
            logger.error(f"Store error on {self._table_name} during {step}: {e.message}")
            raise StoreError(f"{self._table_name}: {e.message}", step=step) from e
        except httpx.HTTPError as e:
            logger.error(f"Transport error on {self._table_name} during {step}: {e}")
            raise StoreError(f"{self._table_name}: {e}", step=step) from e
    
    async def find_by_id(self, id: str) -> Optional[T]:
        """Find a single record by ID"""
        query = self._client.table(self._table_name).select("*").eq("id", id)
        response = self._execute(query, f"select {self._table_name}")
        
        if not response.data:
            return None
        
        return self._to_model(response.data[0])
    
    async def find_by_filters(
        self,
        filters: Dict[str, Any],
        order_by: Optional[str] = "created_at",
        desc: bool = True,
        limit: Optional[int] = None,
    ) -> List[T]:
        """Find records matching equality filters"""
        query = self._client.table(self._table_name).select("*")
        
        for key, value in filters.items():
            query = query.eq(key, value)
        
        if order_by:
            query = query.order(order_by, desc=desc)
        
        if limit:
            query = query.limit(limit)
        
        response = self._execute(query, f"select {self._table_name}")
        return self._to_models(response.data)
    
    async def find_in(
        self,
        column: str,
        values: Iterable[Any],
        order_by: Optional[str] = "created_at",
        desc: bool = True,
        filters: Optional[Dict[str, Any]] = None,
    ) -> List[T]:
        """Find records whose column is one of values, narrowed by optional equality filters"""
        values = list(dict.fromkeys(values))
        if not values:
            return []

        query = self._client.table(self._table_name).select("*").in_(column, values)
        for key, value in (filters or {}).items():
            query = query.eq(key, value)
        if order_by:
            query = query.order(order_by, desc=desc)
        
        response = self._execute(query, f"select {self._table_name}")
        return self._to_models(response.data)
    
    async def create(self, data: CreateT) -> T:
        """Create a new record"""
        data_dict = data.model_dump(exclude_unset=True, mode='json')
        query = self._client.table(self._table_name).insert(data_dict)
        response = self._execute(query, f"insert {self._table_name}")
        
        if not response.data:
            raise StoreError("Failed to create record", step=f"insert {self._table_name}")
        
        return self._to_model(response.data[0])
    
    async def create_many_ignoring_duplicates(
        self,
        data: List[CreateT],
        on_conflict: str,
    ) -> List[T]:
        """Insert records, skipping those that collide on the on_conflict columns"""
        if not data:
            return []
        
        rows = [item.model_dump(mode='json') for item in data]
        query = self._client.table(self._table_name).upsert(
            rows, on_conflict=on_conflict, ignore_duplicates=True
        )
        response = self._execute(query, f"upsert {self._table_name}")
        return self._to_models(response.data or [])
    
    async def update(self, id: str, data: UpdateT) -> Optional[T]:
        """Update a record by ID"""
        data_dict = data.model_dump(exclude_unset=True, mode='json')
        
        if not data_dict:
            # No fields to update
            return await self.find_by_id(id)
        
        query = self._client.table(self._table_name).update(data_dict).eq("id", id)
        response = self._execute(query, f"update {self._table_name}")
        
        if not response.data:
            return None
        
        return self._to_model(response.data[0])
    
    async def update_by_filters(self, filters: Dict[str, Any], patch: Dict[str, Any]) -> List[T]:
        """Apply a patch to every record matching equality filters"""
        query = self._client.table(self._table_name).update(patch)
        for key, value in filters.items():
            query = query.eq(key, value)
        
        response = self._execute(query, f"update {self._table_name}")
        return self._to_models(response.data or [])
    
    async def delete(self, id: str) -> bool:
        """Delete a record by ID. Deleting an absent record is a no-op."""
        query = self._client.table(self._table_name).delete().eq("id", id)
        response = self._execute(query, f"delete {self._table_name}")
        return len(response.data or []) > 0
    
    async def delete_by_filters(self, filters: Dict[str, Any]) -> int:
        """Delete every record matching equality filters, returns count removed"""
        if not filters:
            raise ValueError("Refusing to delete without filters")
        
        query = self._client.table(self._table_name).delete()
        for key, value in filters.items():
            query = query.eq(key, value)
        
        response = self._execute(query, f"delete {self._table_name}")
        return len(response.data or [])
