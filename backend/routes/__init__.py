# routes -- one APIRouter per resource, mounted in backend.app
