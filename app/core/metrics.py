"""Prometheus custom metrics for the Storefront Service."""

from prometheus_client import Counter

# --- Login ---
LOGIN_ATTEMPTS = Counter(
    "storefront_login_attempts_total",
    "Total de tentativas de login",
    ["actor", "result", "failure_reason"],  # admin/customer, success/failure, invalid_credentials/inactive/unverified/none
)

# --- Logout ---
LOGOUTS = Counter(
    "storefront_admin_logouts_total",
    "Total de logouts de administradores",
)

# --- Customer account lifecycle ---
CUSTOMER_REGISTRATIONS = Counter(
    "storefront_customer_registrations_total",
    "Total de cadastros de clientes",
    ["result"],  # success / duplicate
)

EMAIL_CONFIRMATIONS = Counter(
    "storefront_email_confirmations_total",
    "Total de confirmações de email",
    ["result"],  # success / invalid / expired / already_verified
)

PASSWORD_RESETS = Counter(
    "storefront_password_resets_total",
    "Total de operações de recuperação de senha",
    ["stage", "result"],  # request/reset, success/invalid/expired/unknown_email
)

# --- CRUD Operations ---
ADMIN_OPERATIONS = Counter(
    "storefront_admin_operations_total",
    "Total de operações CRUD em administradores",
    ["operation"],  # create / invite / activate / update / delete / status
)

CUSTOMER_OPERATIONS = Counter(
    "storefront_customer_operations_total",
    "Total de operações administrativas em clientes",
    ["operation"],  # update / delete
)

PRODUCT_OPERATIONS = Counter(
    "storefront_product_operations_total",
    "Total de operações CRUD em produtos",
    ["operation"],  # create / update / delete
)

# --- Interactions ---
INTERACTIONS_CREATED = Counter(
    "storefront_interactions_created_total",
    "Total de interações registradas",
    ["type"],
)
