from warehouse_api.database.base import Base
from warehouse_api.database.engine import build_engine, engine, init_db
from warehouse_api.database.session import SessionLocal, get_db
from warehouse_api.database.unit_of_work import unit_of_work

__all__ = ["Base", "SessionLocal", "build_engine", "engine", "get_db", "init_db", "unit_of_work"]
