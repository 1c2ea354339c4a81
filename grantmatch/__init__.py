# grantmatch -- FastAPI server + SQL models for company <-> grant matching
#
# Modules:
#   app           -- FastAPI application with lifespan management
#   config        -- settings from environment / .env
#   database      -- PostgreSQL / SQLite async engine
#   models        -- SQLAlchemy ORM models (users, companies, grants, matches)
#   schemas       -- Pydantic request/response schemas
#   storage       -- data access helpers over AsyncSession
#   matching      -- heuristic match generation
#   auth          -- caller identity (X-User-Id header)
#   seed          -- demo grants for an empty database
#   import_grants -- CSV -> grants import
#   client        -- async HTTP client for the API
#   routes/       -- API endpoints (companies, grants, matches, admin)
#   parsers/      -- external grant sources (BDNS)
