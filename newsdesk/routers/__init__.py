"""
FastAPI routers grouped by concern (auth, feeds, health, collections).

Each module exposes an APIRouter (or, for collections, a list of them) that
app.py includes. Services are looked up on request.app.state.
"""
