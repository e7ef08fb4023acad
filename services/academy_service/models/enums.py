"""Enum definitions for academy service models."""

import enum


class DurationType(str, enum.Enum):
    INDEFINITE = "indefinite"
    THREE_MONTH_BLOCK = "3_month_block"
    FINITE = "finite"
