# =====================================================================
# SECTION START: IMPORTS
# =====================================================================

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import get_cors_origins
from routers.plugin import router as plugin_router

# =====================================================================
# SECTION END: IMPORTS
# =====================================================================


# =====================================================================
# SECTION START: FastAPI APP AND CORS
# =====================================================================

app = FastAPI()

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(plugin_router)

# =====================================================================
# SECTION END: FastAPI APP AND CORS
# =====================================================================


# =====================================================================
# SECTION START: ROOT, HEALTH AND ROUTES
# =====================================================================

@app.get("/")
def home():
    return {"message": "Rezdy connector is running"}


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/routes")
def list_routes():
    # included routers carry no path of their own
    return [route.path for route in app.routes if getattr(route, "path", None)]

# =====================================================================
# SECTION END: ROOT, HEALTH AND ROUTES
# =====================================================================
