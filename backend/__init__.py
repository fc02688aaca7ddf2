# backend -- FastAPI server + SQL models
#
# Modules:
#   app        -- FastAPI application with lifespan management
#   database   -- PostgreSQL / SQLite async engine
#   models     -- SQLAlchemy ORM models (users, startups, investments, KYC)
#   schemas    -- Pydantic request/response schemas
#   security   -- password hashing, JWT bearer auth, role guards
#   converters -- ORM rows -> scoring profiles
#   errors     -- generic 500 mapping
#   import_csv -- CSV -> database import
#   routes/    -- API endpoints (auth, users, startups, investments,
#                 recommendations, analytics, payments)
