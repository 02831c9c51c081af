from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from app.database import Base, engine
import logging

# import models so they are registered on the metadata
import app.models  # noqa: F401

from app.routes.user import router as users_router
from app.routes.business import router as business_router
from app.routes.employees import router as employees_router
from app.routes.customers import router as customers_router
from app.routes.categories import router as categories_router
from app.routes.items import router as items_router
from app.routes.orders import router as orders_router
from app.routes.checkout import router as checkout_router
from app.routes.transactions import router as transactions_router
from app.routes.payment import router as payment_router
from app.routes.qr_codes import router as qr_codes_router

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Dry Clean POS API",
    description="Customers, employees, catalog, checkout, orders, QR codes and mock payments for a dry-cleaning counter",
    version="1.0.0",
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Allow all origins for development
    allow_credentials=True,
    allow_methods=["*"],  # Allows all methods
    allow_headers=["*"],  # Allows all headers
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Flatten Pydantic errors into {field, message} pairs the counter app can show next to inputs"""
    errors = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ())[1:]) or "body"
        message = str(err.get("msg", "Invalid value")).removeprefix("Value error, ")
        errors.append({"field": field, "message": message})

    logger.warning(f"Validation failed on {request.method} {request.url.path}: {errors}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": {
                "error": "ValidationError",
                "message": errors[0]["message"] if errors else "Invalid request",
                "type": "validation_error",
                "errors": errors,
            }
        },
    )


# Create tables (after models are imported)
Base.metadata.create_all(bind=engine)

app.include_router(users_router, prefix="/api/users", tags=["users"])
app.include_router(business_router, prefix="/api/business", tags=["business"])
app.include_router(employees_router, prefix="/api/employees", tags=["employees"])
app.include_router(customers_router, prefix="/api/customers", tags=["customers"])
app.include_router(categories_router, prefix="/api/categories", tags=["categories"])
app.include_router(items_router, prefix="/api/items", tags=["items"])
app.include_router(orders_router, prefix="/api/orders", tags=["orders"])
app.include_router(checkout_router, prefix="/api/checkout", tags=["checkout"])
app.include_router(transactions_router, prefix="/api/transactions", tags=["transactions"])
app.include_router(payment_router, prefix="/api/payment", tags=["payment"])
app.include_router(qr_codes_router, prefix="/api/qrcodes", tags=["qrcodes"])


@app.get("/")
def read_root():
    return {"status": "ok"}
