"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Each module exposes its service through an interface,
and this file creates the concrete implementations.

Every service receives the container's Settings object explicitly, so tests
can build a container (or override a dependency) with fake secrets.
"""

from typing import TYPE_CHECKING, Optional

from shared.config import Settings, get_settings

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from supabase import Client
    from modules.auth.interfaces import IAuthService
    from modules.auth.repository import MagicTokenRepository, UserRepository
    from modules.billing.gateway import StripeGateway
    from modules.billing.interfaces import ICheckoutService, IPaymentEventReconciler


class ServiceContainer:
    """
    Container for all service instances.

    This class manages the lifecycle of service instances and their
    dependencies. Services are created lazily on first access.

    All services are cached as singletons within the container.
    Use reset() to clear all cached services for testing.
    """

    def __init__(self, settings: Optional[Settings] = None, db: "Client | None" = None) -> None:
        self.settings = settings or get_settings()
        self._db = db
        self._user_repository: "UserRepository | None" = None
        self._magic_token_repository: "MagicTokenRepository | None" = None
        self._stripe_gateway: "StripeGateway | None" = None
        self._auth_service: "IAuthService | None" = None
        self._checkout_service: "ICheckoutService | None" = None
        self._reconciler: "IPaymentEventReconciler | None" = None

    @property
    def db(self) -> "Client":
        """Get the Supabase service-role client."""
        if self._db is None:
            from shared.database import get_supabase_client
            self._db = get_supabase_client(self.settings)
        return self._db

    @property
    def user_repository(self) -> "UserRepository":
        """Get the user repository instance."""
        if self._user_repository is None:
            from modules.auth.repository import UserRepository
            self._user_repository = UserRepository(self.db)
        return self._user_repository

    @property
    def magic_token_repository(self) -> "MagicTokenRepository":
        """Get the magic token repository instance."""
        if self._magic_token_repository is None:
            from modules.auth.repository import MagicTokenRepository
            self._magic_token_repository = MagicTokenRepository(self.db)
        return self._magic_token_repository

    @property
    def stripe_gateway(self) -> "StripeGateway":
        """Get the Stripe gateway instance."""
        if self._stripe_gateway is None:
            from modules.billing.gateway import StripeGateway
            self._stripe_gateway = StripeGateway(self.settings)
        return self._stripe_gateway

    @property
    def auth(self) -> "IAuthService":
        """Get the auth service instance."""
        if self._auth_service is None:
            from modules.auth.mailer import MagicLinkMailer
            from modules.auth.service import AuthService
            self._auth_service = AuthService(
                settings=self.settings,
                users=self.user_repository,
                tokens=self.magic_token_repository,
                mailer=MagicLinkMailer(self.settings),
            )
        return self._auth_service

    @property
    def checkout(self) -> "ICheckoutService":
        """Get the checkout service instance."""
        if self._checkout_service is None:
            from modules.billing.service import CheckoutService
            self._checkout_service = CheckoutService(self.settings, self.stripe_gateway)
        return self._checkout_service

    @property
    def reconciler(self) -> "IPaymentEventReconciler":
        """Get the payment event reconciler instance."""
        if self._reconciler is None:
            from modules.billing.reconciler import PaymentEventReconciler
            self._reconciler = PaymentEventReconciler(
                users=self.user_repository,
                gateway=self.stripe_gateway,
            )
        return self._reconciler

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing - allows tests to get fresh
        service instances with different mock dependencies.
        """
        self._user_repository = None
        self._magic_token_repository = None
        self._stripe_gateway = None
        self._auth_service = None
        self._checkout_service = None
        self._reconciler = None


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def set_container(container: ServiceContainer) -> None:
    """Install a pre-built container (used at startup and in tests)."""
    global _container
    _container = container


def reset_container() -> None:
    """
    Reset the service container.

    This clears the cached container, so the next call to get_container()
    will create a fresh container with new service instances.

    Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_settings_dependency() -> Settings:
    """FastAPI dependency for the container's settings."""
    return get_container().settings


def get_auth_service() -> "IAuthService":
    """FastAPI dependency for auth service."""
    return get_container().auth


def get_checkout_service() -> "ICheckoutService":
    """FastAPI dependency for checkout service."""
    return get_container().checkout


def get_payment_event_reconciler() -> "IPaymentEventReconciler":
    """FastAPI dependency for the payment event reconciler."""
    return get_container().reconciler
