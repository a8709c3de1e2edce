"""Cart owner identification

A cart is owned either by a wallet (an id supplied by the caller's
authentication context) or by an anonymous guest session whose token lives in
a long-lived cookie.
"""

import logging
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from fastapi import Depends, Query, Request, Response

from .config import Settings, get_settings

logger = logging.getLogger(__name__)


class CartOwnerKind(str, Enum):
    """Kind of party a cart belongs to"""
    GUEST = "guest"
    WALLET = "wallet"


@dataclass(frozen=True)
class CartIdentifier:
    """Key under which a cart document is addressed"""
    kind: CartOwnerKind
    id: str

    @classmethod
    def guest(cls, session_id: str) -> "CartIdentifier":
        return cls(kind=CartOwnerKind.GUEST, id=session_id)

    @classmethod
    def wallet(cls, wallet_id: str) -> "CartIdentifier":
        return cls(kind=CartOwnerKind.WALLET, id=wallet_id)


class IdentifierResolver:
    """Resolves the cart owner for a single request"""

    def __init__(self, request: Request, response: Response, settings: Settings):
        self.request = request
        self.response = response
        self.settings = settings

    def _session_cookie(self) -> Optional[str]:
        # A token minted earlier in this request wins over the (absent) cookie
        minted = getattr(self.request.state, "cart_session_id", None)
        return minted or self.request.cookies.get(self.settings.cart_cookie_name)

    def resolve(self, wallet_id: Optional[str] = None) -> CartIdentifier:
        """
        Determine the cart owner.

        An explicit wallet id is trusted as-is. Otherwise the guest session
        cookie is used, minting and setting a fresh one when missing.
        """
        if wallet_id:
            return CartIdentifier.wallet(wallet_id)

        session_id = self._session_cookie()
        if not session_id:
            session_id = str(uuid.uuid4())
            self.request.state.cart_session_id = session_id
            self.response.set_cookie(
                key=self.settings.cart_cookie_name,
                value=session_id,
                max_age=self.settings.cart_cookie_max_age,
                path="/",
                httponly=True,
                secure=self.settings.cookie_secure,
                samesite="strict",
            )
            logger.info(f"Issued new cart session {session_id}")

        return CartIdentifier.guest(session_id)

    def validate_session(self, candidate_id: str) -> bool:
        """Check a session id against the caller's own cookie"""
        stored = self.request.cookies.get(self.settings.cart_cookie_name)
        return bool(stored) and stored == candidate_id


def get_identifier_resolver(
    request: Request,
    response: Response,
    settings: Settings = Depends(get_settings),
) -> IdentifierResolver:
    """FastAPI dependency building a resolver bound to the current request"""
    return IdentifierResolver(request, response, settings)


def get_cart_identifier(
    wallet_id: Optional[str] = Query(None, alias="walletId"),
    resolver: IdentifierResolver = Depends(get_identifier_resolver),
) -> CartIdentifier:
    """FastAPI dependency resolving the owner of the targeted cart"""
    return resolver.resolve(wallet_id)
