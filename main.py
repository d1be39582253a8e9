import logging
import os
from typing import List, Optional

from fastapi import Depends, FastAPI, Query, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.security import OAuth2PasswordBearer
from fastapi.staticfiles import StaticFiles

import config
from auth import decode_access_token, get_user, login, signup
from builder import allocate_build
from catalog import ProductRepository, filter_products, sort_products
from database import COLLECTIONS, JsonDatabase
from errors import install_error_handlers
from orders import record_order
from schemas import Build, BuildRequest, LoginRequest, OrderRequest, Product, SignupRequest, Stats
from stats import admin_stats

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("quantum_build")

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/login")


# Dependencies
def get_db(request: Request) -> JsonDatabase:
    return request.app.state.db


def get_catalog(request: Request) -> ProductRepository:
    return request.app.state.catalog


def get_current_user(token: str = Depends(oauth2_scheme), db: JsonDatabase = Depends(get_db)) -> dict:
    return get_user(db, decode_access_token(token))


def create_app(data_dir: Optional[str] = None, static_dir: Optional[str] = None) -> FastAPI:
    app = FastAPI(title="Quantum Build API")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_error_handlers(app)

    db = JsonDatabase(data_dir or config.DATA_DIR)
    app.state.db = db
    app.state.catalog = ProductRepository(db)
    logger.info("Using data directory %s", db.data_dir)

    static_dir = static_dir or config.STATIC_DIR
    serve_static = bool(static_dir) and os.path.isdir(static_dir)
    _add_routes(app, root_message=not serve_static)

    if serve_static:
        # the storefront owns "/" when mounted
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
    return app


def _add_routes(app: FastAPI, root_message: bool = True) -> None:

    @app.get("/api/health")
    def health():
        return {"message": "Quantum Build backend is running"}

    if root_message:
        app.add_api_route("/", health, methods=["GET"])

    # Catalog
    @app.get("/api/products", response_model=List[Product])
    def list_products(
        category: Optional[str] = None,
        q: Optional[str] = None,
        sort: Optional[str] = Query(None, description="price-asc|price-desc|name-asc"),
        catalog: ProductRepository = Depends(get_catalog),
    ):
        return sort_products(filter_products(catalog.all(), category, q), sort)

    @app.get("/api/products/{product_id}", response_model=Product)
    def get_product(product_id: int, catalog: ProductRepository = Depends(get_catalog)):
        return catalog.get(product_id)

    # Auth
    @app.post("/api/signup", status_code=status.HTTP_201_CREATED)
    def signup_route(body: SignupRequest, db: JsonDatabase = Depends(get_db)):
        user = signup(db, body)
        return {"message": "User created successfully", "user": user.model_dump()}

    @app.post("/api/login")
    def login_route(body: LoginRequest, db: JsonDatabase = Depends(get_db)):
        return login(db, body)

    @app.get("/api/me")
    def me(current: dict = Depends(get_current_user)):
        return {"id": str(current.get("id")), "name": current.get("name"), "email": current.get("email")}

    # AI Builder
    @app.post("/api/ai-build", response_model=Build)
    def ai_build(body: BuildRequest, catalog: ProductRepository = Depends(get_catalog)):
        return allocate_build(body.budget, body.usage, catalog.all())

    # Orders
    @app.post("/api/orders", status_code=status.HTTP_201_CREATED)
    def create_order(
        body: OrderRequest,
        db: JsonDatabase = Depends(get_db),
        catalog: ProductRepository = Depends(get_catalog),
    ):
        order = record_order(db, catalog, body)
        return {"message": "Order placed successfully", "orderId": order.id}

    # Admin
    @app.get("/api/admin/stats", response_model=Stats)
    def stats(db: JsonDatabase = Depends(get_db)):
        return admin_stats(db)

    # Seed sample data if empty
    @app.post("/api/seed")
    def seed(db: JsonDatabase = Depends(get_db), catalog: ProductRepository = Depends(get_catalog)):
        seeded = False
        with db.lock:
            if db.count("products") == 0:
                db.replace_documents("products", SAMPLE_PRODUCTS)
                seeded = True
        if seeded:
            logger.info("Seeded %d sample products", len(SAMPLE_PRODUCTS))
        return {"ok": True, "products": len(catalog.reload())}

    @app.get("/test")
    def test_database(db: JsonDatabase = Depends(get_db)):
        response = {
            "backend": "✅ Running",
            "data_dir": db.data_dir,
            "writable": os.access(db.data_dir, os.W_OK),
            "collections": {},
        }
        for name in COLLECTIONS:
            path = db.path(name)
            response["collections"][name] = db.count(name) if os.path.exists(path) else "❌ Missing"
        return response


SAMPLE_PRODUCTS = [
    {"id": 1, "name": "AMD Ryzen 5 5600", "category": "cpu", "price": 11500, "image": "images/ryzen5-5600.jpg",
     "badge": "Best Value", "specs": "6C/12T, 4.4 GHz boost, AM4", "description": "Six-core AM4 processor for budget gaming builds.",
     "usage": "Gaming", "stock": 14},
    {"id": 2, "name": "Intel Core i5-13400F", "category": "cpu", "price": 18500, "image": "images/i5-13400f.jpg",
     "badge": "Popular", "specs": "10C/16T, 4.6 GHz boost, LGA1700", "description": "Hybrid-core CPU for gaming and streaming.",
     "usage": "Gaming", "stock": 9},
    {"id": 3, "name": "AMD Ryzen 9 7900X", "category": "cpu", "price": 38000, "image": "images/ryzen9-7900x.jpg",
     "badge": "Creator Pick", "specs": "12C/24T, 5.6 GHz boost, AM5", "description": "High core count for rendering and editing.",
     "usage": "Editing", "stock": 4},
    {"id": 4, "name": "NVIDIA RTX 3050 8GB", "category": "gpu", "price": 21000, "image": "images/rtx3050.jpg",
     "badge": "Entry", "specs": "8GB GDDR6, PCIe 4.0", "description": "1080p gaming at medium-high settings.",
     "usage": "Gaming", "stock": 11},
    {"id": 5, "name": "NVIDIA RTX 4060 Ti 8GB", "category": "gpu", "price": 39000, "image": "images/rtx4060ti.jpg",
     "badge": "Popular", "specs": "8GB GDDR6, DLSS 3", "description": "High-refresh 1080p and entry 1440p gaming.",
     "usage": "Gaming", "stock": 7},
    {"id": 6, "name": "NVIDIA RTX 4070 Super 12GB", "category": "gpu", "price": 62000, "image": "images/rtx4070s.jpg",
     "badge": "Premium", "specs": "12GB GDDR6X, DLSS 3", "description": "1440p ultra gaming and GPU-accelerated editing.",
     "usage": "Gaming", "stock": 3},
    {"id": 7, "name": "MSI B550M PRO-VDH", "category": "motherboard", "price": 9000, "image": "images/b550m.jpg",
     "badge": "Best Value", "specs": "AM4, mATX, PCIe 4.0", "description": "Reliable micro-ATX board for Ryzen builds.",
     "usage": "General", "stock": 12},
    {"id": 8, "name": "Gigabyte B760 Gaming X", "category": "motherboard", "price": 15500, "image": "images/b760.jpg",
     "badge": "Popular", "specs": "LGA1700, ATX, DDR5", "description": "Feature-rich ATX board for 13th/14th gen Intel.",
     "usage": "Gaming", "stock": 6},
    {"id": 9, "name": "Corsair Vengeance 16GB DDR4", "category": "ram", "price": 3800, "image": "images/vengeance16.jpg",
     "badge": "Essential", "specs": "2x8GB, 3200 MHz", "description": "Dual-channel kit for everyday gaming.",
     "usage": "General", "stock": 20},
    {"id": 10, "name": "G.Skill Trident Z5 32GB DDR5", "category": "ram", "price": 11000, "image": "images/tridentz5.jpg",
     "badge": "Creator Pick", "specs": "2x16GB, 6000 MHz", "description": "Fast DDR5 for heavy multitasking and editing.",
     "usage": "Editing", "stock": 8},
    {"id": 11, "name": "Crucial P3 1TB NVMe", "category": "storage", "price": 5200, "image": "images/p3-1tb.jpg",
     "badge": "Best Value", "specs": "PCIe 3.0, 3500 MB/s", "description": "Fast boot drive for any build.",
     "usage": "General", "stock": 18},
    {"id": 12, "name": "Samsung 990 Pro 2TB", "category": "storage", "price": 16000, "image": "images/990pro.jpg",
     "badge": "Premium", "specs": "PCIe 4.0, 7450 MB/s", "description": "Top-tier NVMe for large project files.",
     "usage": "Editing", "stock": 5},
    {"id": 13, "name": "Deepcool PK550D 550W", "category": "psu", "price": 4200, "image": "images/pk550d.jpg",
     "badge": "Essential", "specs": "550W, 80+ Bronze", "description": "Dependable PSU for mid-range builds.",
     "usage": "General", "stock": 15},
    {"id": 14, "name": "Corsair RM750e 750W", "category": "psu", "price": 9500, "image": "images/rm750e.jpg",
     "badge": "Popular", "specs": "750W, 80+ Gold, fully modular", "description": "Quiet modular PSU with headroom.",
     "usage": "Gaming", "stock": 10},
    {"id": 15, "name": "Ant Esports ICE-100", "category": "cabinet", "price": 2800, "image": "images/ice100.jpg",
     "badge": "Best Value", "specs": "Mid tower, mesh front", "description": "Airflow-focused budget cabinet.",
     "usage": "General", "stock": 13},
    {"id": 16, "name": "Lian Li Lancool 216", "category": "cabinet", "price": 8500, "image": "images/lancool216.jpg",
     "badge": "Premium", "specs": "Mid tower, 2x160mm fans", "description": "Excellent airflow and cable management.",
     "usage": "Gaming", "stock": 6},
]


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=config.PORT)
