"""VAPID key management for Web Push."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Tuple

from cryptography.hazmat.primitives import serialization
from py_vapid import Vapid01
from py_vapid.utils import b64urlencode
from sqlalchemy.orm import Session

from weekday_planner.core.config import settings
from weekday_planner.db.models.vapid_key import VapidKey
from weekday_planner.db.upsert import insert_ignore

logger = logging.getLogger(__name__)

VAPID_ROW_ID = 1


@dataclass(frozen=True)
class VapidKeys:
    public_key: str
    private_key: str


def generate_vapid_keys() -> Tuple[str, str]:
    """New P-256 key pair as (application server key, raw private key), both base64url."""
    vapid = Vapid01()
    vapid.generate_keys()
    public = vapid.public_key.public_bytes(
        serialization.Encoding.X962,
        serialization.PublicFormat.UncompressedPoint,
    )
    private = vapid.private_key.private_numbers().private_value.to_bytes(32, "big")
    return b64urlencode(public), b64urlencode(private)


def get_vapid_keys(db: Session) -> VapidKeys:
    """
    Keys from settings when both are configured, else the stored pair.

    The first caller to find the table empty generates and inserts a pair; a
    concurrent insert loses on the primary key and everyone reads the winner.
    """
    if settings.vapid_public_key and settings.vapid_private_key:
        return VapidKeys(settings.vapid_public_key, settings.vapid_private_key)

    row = db.get(VapidKey, VAPID_ROW_ID)
    if row is None:
        public_key, private_key = generate_vapid_keys()
        try:
            insert_ignore(
                db,
                VapidKey,
                {"id": VAPID_ROW_ID, "public_key": public_key, "private_key": private_key},
                conflict_columns=["id"],
            )
            db.commit()
        except Exception:
            db.rollback()
            raise
        row = db.get(VapidKey, VAPID_ROW_ID)
        logger.info("Generated VAPID key pair")
    return VapidKeys(row.public_key, row.private_key)
