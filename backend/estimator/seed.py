from __future__ import annotations

import datetime as dt
import logging
from decimal import Decimal

from .models import EstimateStatus, InvoiceStatus, utcnow
from .services.numbering import ESTIMATE_PREFIX, INVOICE_PREFIX, current_year, format_sequence_number
from .services.store import EstimationStore

# Day offsets are relative to the moment of seeding.
SAMPLE_CLIENTS = [
    {
        "name": "Smith Residence",
        "email": "john.smith@email.com",
        "phone": "(555) 123-4567",
        "address": "123 Oak Street",
        "city": "Springfield",
        "state": "IL",
        "zip_code": "62701",
        "created": -30,
        "updated": -30,
    },
    {
        "name": "Johnson Commercial Properties",
        "email": "contact@johnsonproperties.com",
        "phone": "(555) 234-5678",
        "address": "456 Business Park Dr",
        "city": "Chicago",
        "state": "IL",
        "zip_code": "60601",
        "created": -45,
        "updated": -45,
    },
    {
        "name": "Martinez Family Home",
        "email": "maria.martinez@email.com",
        "phone": "(555) 345-6789",
        "address": "789 Maple Avenue",
        "city": "Naperville",
        "state": "IL",
        "zip_code": "60540",
        "created": -15,
        "updated": -15,
    },
    {
        "name": "Riverside Restaurant Group",
        "email": "info@riversidegroup.com",
        "phone": "(555) 456-7890",
        "address": "321 River Road",
        "city": "Peoria",
        "state": "IL",
        "zip_code": "61602",
        "created": -60,
        "updated": -60,
    },
]

SAMPLE_ESTIMATES = [
    {
        "client": 0,
        "title": "Kitchen Remodel",
        "description": "Complete kitchen renovation including new cabinets, countertops, appliances, and "
        "flooring. Includes electrical and plumbing updates.",
        "total_amount": "45000.00",
        "status": EstimateStatus.APPROVED,
        "valid_until": 30,
        "created": -25,
        "updated": -20,
    },
    {
        "client": 0,
        "title": "Master Bathroom Addition",
        "description": "Add new master bathroom with walk-in shower, double vanity, and heated flooring.",
        "total_amount": "32000.00",
        "status": EstimateStatus.SENT,
        "valid_until": 45,
        "created": -10,
        "updated": -10,
    },
    {
        "client": 1,
        "title": "Office Building Renovation",
        "description": "Complete renovation of 3,000 sq ft office space including new flooring, lighting, "
        "HVAC updates, and conference room build-out.",
        "total_amount": "125000.00",
        "status": EstimateStatus.APPROVED,
        "valid_until": 60,
        "created": -40,
        "updated": -35,
    },
    {
        "client": 2,
        "title": "Deck Construction",
        "description": "Build new 400 sq ft composite deck with integrated lighting and railings.",
        "total_amount": "18500.00",
        "status": EstimateStatus.DRAFT,
        "valid_until": 30,
        "created": -5,
        "updated": -5,
    },
    {
        "client": 3,
        "title": "Restaurant Kitchen Upgrade",
        "description": "Commercial kitchen upgrade including new exhaust system, stainless steel prep "
        "tables, and electrical upgrades.",
        "total_amount": "85000.00",
        "status": EstimateStatus.SENT,
        "valid_until": 20,
        "created": -55,
        "updated": -50,
    },
    {
        "client": 2,
        "title": "Basement Finishing",
        "description": "Finish 800 sq ft basement with new drywall, flooring, lighting, and bathroom addition.",
        "total_amount": "42000.00",
        "status": EstimateStatus.REJECTED,
        "valid_until": -5,
        "created": -20,
        "updated": -12,
    },
]

SAMPLE_INVOICES = [
    {
        "client": 0,
        "estimate": 0,
        "description": "Kitchen Remodel - Initial Payment (50%)",
        "amount": "22500.00",
        "status": InvoiceStatus.PAID,
        "due": -15,
        "paid": -18,
        "created": -20,
        "updated": -18,
    },
    {
        "client": 0,
        "estimate": 0,
        "description": "Kitchen Remodel - Progress Payment (25%)",
        "amount": "11250.00",
        "status": InvoiceStatus.SENT,
        "due": 10,
        "paid": None,
        "created": -5,
        "updated": -5,
    },
    {
        "client": 1,
        "estimate": 2,
        "description": "Office Building Renovation - Deposit",
        "amount": "37500.00",
        "status": InvoiceStatus.PAID,
        "due": -30,
        "paid": -32,
        "created": -35,
        "updated": -32,
    },
    {
        "client": 1,
        "estimate": 2,
        "description": "Office Building Renovation - Progress Payment #1",
        "amount": "43750.00",
        "status": InvoiceStatus.PAID,
        "due": -10,
        "paid": -8,
        "created": -15,
        "updated": -8,
    },
    {
        "client": 1,
        "estimate": 2,
        "description": "Office Building Renovation - Final Payment",
        "amount": "43750.00",
        "status": InvoiceStatus.SENT,
        "due": 15,
        "paid": None,
        "created": -2,
        "updated": -2,
    },
    {
        "client": 3,
        "estimate": None,
        "description": "Emergency Plumbing Repair - Kitchen Line",
        "amount": "1850.00",
        "status": InvoiceStatus.OVERDUE,
        "due": -5,
        "paid": None,
        "created": -25,
        "updated": -25,
    },
    {
        "client": 2,
        "estimate": None,
        "description": "Consultation and Site Assessment",
        "amount": "500.00",
        "status": InvoiceStatus.DRAFT,
        "due": 30,
        "paid": None,
        "created": -3,
        "updated": -3,
    },
]


logger = logging.getLogger(__name__)


def seed_sample_data(store: EstimationStore) -> bool:
    """Populate an empty database with sample clients, estimates and invoices.

    Returns ``True`` when data was inserted and ``False`` when clients already exist.
    """
    logger.info("Checking for existing clients before seeding")
    if store.has_clients():
        logger.info("Sample data already present; skipping seed")
        return False

    now = utcnow()
    year = current_year()

    def days(offset):
        return None if offset is None else now + dt.timedelta(days=offset)

    logger.info("Seeding sample data into database")
    clients = []
    for payload in SAMPLE_CLIENTS:
        fields = {key: value for key, value in payload.items() if key not in ("created", "updated")}
        clients.append(
            store.create_client(
                **fields,
                created_at=days(payload["created"]),
                updated_at=days(payload["updated"]),
            )
        )

    estimates = []
    for sequence, payload in enumerate(SAMPLE_ESTIMATES, start=1):
        estimates.append(
            store.create_estimate(
                client_id=clients[payload["client"]].id,
                estimate_number=format_sequence_number(ESTIMATE_PREFIX, year, sequence),
                title=payload["title"],
                description=payload["description"],
                total_amount=Decimal(payload["total_amount"]),
                status=payload["status"],
                valid_until=days(payload["valid_until"]),
                created_at=days(payload["created"]),
                updated_at=days(payload["updated"]),
            )
        )

    for sequence, payload in enumerate(SAMPLE_INVOICES, start=1):
        estimate_index = payload["estimate"]
        store.create_invoice(
            client_id=clients[payload["client"]].id,
            estimate_id=None if estimate_index is None else estimates[estimate_index].id,
            invoice_number=format_sequence_number(INVOICE_PREFIX, year, sequence),
            description=payload["description"],
            amount=Decimal(payload["amount"]),
            status=payload["status"],
            due_date=days(payload["due"]),
            paid_date=days(payload["paid"]),
            created_at=days(payload["created"]),
            updated_at=days(payload["updated"]),
        )

    logger.info(
        "Sample data seeded: %d clients, %d estimates, %d invoices",
        len(clients),
        len(estimates),
        len(SAMPLE_INVOICES),
    )
    return True
