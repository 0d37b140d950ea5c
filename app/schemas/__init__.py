from app.schemas.common import ApiResponse, MessageResponse, DeletionResult, Pagination
from app.schemas.admin import (
    AdminLoginRequest,
    AdminCreate,
    AdminUpdate,
    AdminStatusUpdate,
    AdminSummary,
    AdminResponse,
    AdminLoginResponse,
    AdminMeResponse,
)
from app.schemas.product import (
    ProductCreate,
    ProductUpdate,
    ProductSummary,
    ProductResponse,
    ProductListItem,
    ProductDetail,
    ProductListResponse,
)
from app.schemas.interaction import (
    InteractionCreate,
    AdminReplyCreate,
    InteractionResponse,
)
from app.schemas.customer import (
    CustomerRegister,
    CustomerLoginRequest,
    EmailRequest,
    ConfirmEmailRequest,
    PasswordResetRequest,
    CustomerUpdate,
    CustomerRegistered,
    CustomerResponse,
    CustomerListItem,
    CustomerDetail,
    CustomerLoginData,
    CustomerListResponse,
)
from app.schemas.dashboard import DashboardSummary
