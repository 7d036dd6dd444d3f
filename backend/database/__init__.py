from .config import Base, engine, SessionLocal, make_engine, make_session_factory, session_scope
