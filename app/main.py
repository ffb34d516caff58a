# app/main.py
import logging
from datetime import datetime, timezone
from typing import Optional, List

import uvicorn
from fastapi import FastAPI, File, Form, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse

from .catalog import list_category_logic, create_product_logic, delete_product_logic
from .config import Settings
from .core import CatalogError, PayloadTooLarge
from .database import CategoryStore, AttachmentStore
from .models import Product, ServiceInfo, Health

logger = logging.getLogger(__name__)

__version__ = "1.0.0"

# room for the text fields and multipart boundaries around the file itself
FORM_OVERHEAD_BYTES = 64 * 1024

ENDPOINTS = [
    "GET /",
    "GET /health",
    "GET /{category}",
    "POST /{category}",
    "DELETE /{category}/{id}",
    "GET /uploads/{filename}",
]


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    logging.basicConfig(level=settings.log_level)

    app = FastAPI(title="catalog-store", version=__version__)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ---------------------------
    # Stores
    # ---------------------------
    catalog = CategoryStore(settings.data_dir, settings.category_suffix, settings.allowed_categories)
    attachments = AttachmentStore(settings.uploads_dir, settings.max_upload_bytes)
    app.state.settings = settings
    app.state.catalog = catalog
    app.state.attachments = attachments
    logger.info("data dir: %s, uploads dir: %s (%s)", settings.data_dir, settings.uploads_dir, settings.environment)

    def _base_url(request: Request) -> Optional[str]:
        return str(request.base_url) if settings.public_image_urls else None

    # ---------------------------
    # Errors
    # ---------------------------
    @app.exception_handler(CatalogError)
    async def catalog_error_handler(request: Request, exc: CatalogError):
        if exc.status_code >= 500:
            logger.error("%s %s -> %s: %s", request.method, request.url.path, exc.message, exc.details)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.middleware("http")
    async def limit_upload_size(request: Request, call_next):
        length = request.headers.get("content-length")
        if request.method == "POST" and length and length.isdigit():
            if int(length) > settings.max_upload_bytes + FORM_OVERHEAD_BYTES:
                exc = PayloadTooLarge("File too large", details={"limit_bytes": settings.max_upload_bytes})
                logger.warning("rejected %s %s: %s bytes", request.method, request.url.path, length)
                return JSONResponse(status_code=exc.status_code, content=exc.to_dict())
        return await call_next(request)

    # ---------------------------
    # Service endpoints
    # ---------------------------
    @app.get("/", response_model=ServiceInfo)
    async def service_info():
        return ServiceInfo(
            name="catalog-store",
            version=__version__,
            environment=settings.environment,
            endpoints=ENDPOINTS,
            categories=settings.allowed_categories or catalog.list_categories(),
        )

    @app.get("/health", response_model=Health)
    async def health():
        return Health(status="ok", timestamp=datetime.now(timezone.utc).isoformat())

    @app.get("/uploads/{filename}")
    async def get_upload(filename: str):
        return FileResponse(attachments.load_attachment(filename))

    # ---------------------------
    # Catalog endpoints
    # ---------------------------
    # records go back exactly as stored; Product only documents the shape
    @app.get("/{category}", responses={200: {"model": List[Product]}})
    async def list_category(category: str, request: Request):
        return await list_category_logic(catalog, category, _base_url(request))

    @app.post("/{category}", responses={201: {"model": Product}}, status_code=201)
    async def create_product(
        category: str,
        request: Request,
        name: Optional[str] = Form(None),
        price: Optional[str] = Form(None),
        volume: Optional[str] = Form(None),
        image: Optional[UploadFile] = File(None),
    ):
        return await create_product_logic(
            catalog, attachments, category, name, price, volume, image, _base_url(request)
        )

    @app.delete("/{category}/{product_id}", responses={200: {"model": Product}})
    async def delete_product(category: str, product_id: str, request: Request):
        return await delete_product_logic(catalog, attachments, category, product_id, _base_url(request))

    return app


app = create_app()


if __name__ == "__main__":
    settings = app.state.settings
    uvicorn.run("app.main:app", host=settings.host, port=settings.port)
