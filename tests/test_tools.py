from __future__ import annotations

import datetime as dt
import uuid
from decimal import Decimal

from backend.estimator.mcp.tools import ClientTools, EstimateTools, InvoiceTools
from backend.estimator.mcp.tools.base import encode_payload
from backend.estimator.models import EstimateStatus, InvoiceStatus, utcnow
from backend.estimator.services.numbering import current_year


def _explode(*args, **kwargs):
    raise AssertionError("store must not be consulted")


def _client_named(store, name):
    return next(client for client in store.list_clients() if client.name == name)


def test_invalid_client_id_never_touches_store(store, monkeypatch):
    monkeypatch.setattr(store, "get_client", _explode)
    monkeypatch.setattr(store, "client_exists", _explode)
    tools = ClientTools(store)
    assert encode_payload(tools.get_client_details("not-a-guid")) == {"error": "Invalid client ID format"}

    estimates = EstimateTools(store)
    result = estimates.create_estimate("not-a-guid", "Deck", "", "abc")
    assert encode_payload(result) == {"error": "Invalid client ID format"}


def test_unknown_ids_report_not_found(store):
    missing = str(uuid.uuid4())
    assert encode_payload(ClientTools(store).get_client_details(missing)) == {"error": "Client not found"}
    assert encode_payload(EstimateTools(store).get_estimate_details(missing)) == {"error": "Estimate not found"}
    assert encode_payload(InvoiceTools(store).get_client_financial_summary(missing)) == {
        "error": "Client not found"
    }


def test_list_clients_ordered_by_name_with_pascal_case_keys(seeded_store):
    payload = encode_payload(ClientTools(seeded_store).list_clients())
    assert [client["Name"] for client in payload] == [
        "Johnson Commercial Properties",
        "Martinez Family Home",
        "Riverside Restaurant Group",
        "Smith Residence",
    ]
    assert set(payload[0]) == {"Id", "Name", "Email", "Phone", "City", "State"}


def test_client_details_include_estimates_and_invoices(seeded_store):
    smith = _client_named(seeded_store, "Smith Residence")
    payload = encode_payload(ClientTools(seeded_store).get_client_details(smith.id))
    assert payload["ZipCode"] == "62701"
    assert sorted(estimate["Title"] for estimate in payload["Estimates"]) == [
        "Kitchen Remodel",
        "Master Bathroom Addition",
    ]
    assert {invoice["Amount"] for invoice in payload["Invoices"]} == {"22500.00", "11250.00"}


def test_malformed_filter_is_dropped(seeded_store):
    tools = EstimateTools(seeded_store)
    everything = encode_payload(tools.list_estimates())
    assert len(everything) == 6
    assert encode_payload(tools.list_estimates("not-a-guid")) == everything

    created = [item["CreatedAt"] for item in everything]
    assert created == sorted(created, reverse=True)

    invoices = InvoiceTools(seeded_store)
    assert len(encode_payload(invoices.list_invoices(client_id="garbage", estimate_id="nope"))) == 7


def test_filters_restrict_listing(seeded_store):
    smith = _client_named(seeded_store, "Smith Residence")
    estimates = encode_payload(EstimateTools(seeded_store).list_estimates(smith.id))
    assert {item["ClientId"] for item in estimates} == {smith.id}
    assert len(estimates) == 2

    kitchen = next(item for item in estimates if item["Title"] == "Kitchen Remodel")
    invoices = encode_payload(InvoiceTools(seeded_store).list_invoices(estimate_id=kitchen["Id"]))
    assert sorted(item["Amount"] for item in invoices) == ["11250.00", "22500.00"]


def test_estimate_details_include_related_invoices(seeded_store):
    smith = _client_named(seeded_store, "Smith Residence")
    kitchen = next(e for e in seeded_store.list_estimates(smith.id) if e.title == "Kitchen Remodel")
    payload = encode_payload(EstimateTools(seeded_store).get_estimate_details(kitchen.id))
    assert payload["ClientName"] == "Smith Residence"
    assert payload["Status"] == "Approved"
    assert payload["TotalAmount"] == "45000.00"
    assert len(payload["RelatedInvoices"]) == 2


def test_create_estimate_assigns_sequential_numbers(store, make_client):
    client = make_client()
    tools = EstimateTools(store)
    year = current_year()

    first = encode_payload(tools.create_estimate(client.id, "Deck", "Cedar deck", "1500"))
    second = encode_payload(tools.create_estimate(client.id, "Roof", "Shingles", "8200.5", "sent"))

    assert first["success"] is True
    assert first["message"] == "Estimate created successfully"
    assert first["estimate"]["EstimateNumber"] == f"EST-{year}-001"
    assert first["estimate"]["TotalAmount"] == "1500.00"
    assert first["estimate"]["Status"] == "Draft"
    assert second["estimate"]["EstimateNumber"] == f"EST-{year}-002"
    assert second["estimate"]["Status"] == "Sent"
    assert second["estimate"]["TotalAmount"] == "8200.50"
    assert "UpdatedAt" not in second["estimate"]


def test_create_estimate_sets_validity_window(store, make_client):
    client = make_client()
    before = utcnow()
    estimate = encode_payload(EstimateTools(store).create_estimate(client.id, "Deck", "", "10"))["estimate"]
    valid_until = dt.datetime.fromisoformat(estimate["ValidUntil"])
    assert before + dt.timedelta(days=30) <= valid_until <= utcnow() + dt.timedelta(days=30)


def test_create_estimate_continues_existing_sequence(store, make_client, make_estimate):
    client = make_client()
    year = current_year()
    make_estimate(client.id, f"EST-{year}-007")
    make_estimate(client.id, f"EST-{year - 1}-050")
    payload = encode_payload(EstimateTools(store).create_estimate(client.id, "Patio", "", "99.99"))
    assert payload["estimate"]["EstimateNumber"] == f"EST-{year}-008"


def test_create_estimate_unknown_status_falls_back_to_draft(store, make_client):
    client = make_client()
    payload = encode_payload(EstimateTools(store).create_estimate(client.id, "Deck", "", "10", "Pending"))
    assert payload["estimate"]["Status"] == "Draft"


def test_create_estimate_validation_order(store, make_client):
    tools = EstimateTools(store)
    missing = str(uuid.uuid4())
    assert encode_payload(tools.create_estimate(missing, "Deck", "", "abc")) == {
        "error": "Invalid total amount format"
    }
    for malformed in ("1e30", "1_000", "10000000000000000"):
        assert encode_payload(tools.create_estimate(missing, "Deck", "", malformed)) == {
            "error": "Invalid total amount format"
        }
    assert encode_payload(tools.create_estimate(missing, "Deck", "", "10")) == {"error": "Client not found"}
    assert store.list_estimates() == []


def test_large_amounts_survive_storage_exactly(store, make_client):
    client = make_client()
    tools = EstimateTools(store)

    created = encode_payload(tools.create_estimate(client.id, "Big", "x", "1234567890123456.78"))
    estimate_id = created["estimate"]["Id"]

    assert store.get_estimate(estimate_id).total_amount == Decimal("1234567890123456.78")
    details = encode_payload(tools.get_estimate_details(estimate_id))
    assert details["TotalAmount"] == "1234567890123456.78"

    encode_payload(tools.update_estimate(estimate_id, total_amount="-9999999999999999.99"))
    assert store.get_estimate(estimate_id).total_amount == Decimal("-9999999999999999.99")


def test_update_estimate_rejects_bad_status_without_writing(store, make_client, make_estimate):
    client = make_client()
    estimate = make_estimate(client.id, "EST-2025-001", title="Original")
    tools = EstimateTools(store)

    result = encode_payload(tools.update_estimate(estimate.id, title="Changed", status="Paid"))
    assert result == {"error": "Invalid status. Valid values are: Draft, Sent, Approved, Rejected"}

    result = encode_payload(tools.update_estimate(estimate.id, title="Changed", valid_until="next week"))
    assert result == {"error": "Invalid validUntil date format"}

    result = encode_payload(tools.update_estimate(estimate.id, title="Changed", total_amount="lots"))
    assert result == {"error": "Invalid total amount format"}

    assert store.get_estimate(estimate.id).title == "Original"


def test_update_estimate_applies_non_empty_fields(store, make_client, make_estimate):
    client = make_client()
    stale = dt.datetime(2024, 1, 1, 12, 0)
    estimate = make_estimate(
        client.id,
        "EST-2025-001",
        title="Original",
        description="Keep me",
        created_at=stale,
        updated_at=stale,
    )

    result = encode_payload(
        EstimateTools(store).update_estimate(
            estimate.id,
            title="",
            description="",
            total_amount="2500",
            status="approved",
            valid_until="2030-01-15T00:00:00",
        )
    )

    assert result["success"] is True
    assert result["message"] == "Estimate updated successfully"
    updated = result["estimate"]
    assert updated["Title"] == "Original"
    assert updated["Description"] == "Keep me"
    assert updated["TotalAmount"] == "2500.00"
    assert updated["Status"] == "Approved"
    assert updated["ValidUntil"].startswith("2030-01-15T00:00:00")
    assert dt.datetime.fromisoformat(updated["UpdatedAt"]) > stale
    assert updated["CreatedAt"].startswith("2024-01-01T12:00:00")


def test_update_estimate_without_fields_still_refreshes_timestamp(store, make_client, make_estimate):
    client = make_client()
    stale = dt.datetime(2024, 1, 1)
    estimate = make_estimate(client.id, "EST-2025-001", created_at=stale, updated_at=stale)

    EstimateTools(store).update_estimate(estimate.id)

    assert store.get_estimate(estimate.id).updated_at > stale


def test_update_estimate_id_checks(store):
    tools = EstimateTools(store)
    assert encode_payload(tools.update_estimate("bad")) == {"error": "Invalid estimate ID format"}
    assert encode_payload(tools.update_estimate(str(uuid.uuid4()))) == {"error": "Estimate not found"}


def test_statistics_on_empty_store(store):
    assert encode_payload(EstimateTools(store).get_estimate_statistics()) == {"message": "No estimates found"}


def test_statistics_breakdown(store, make_client, make_estimate):
    client = make_client()
    base = dt.datetime(2025, 3, 1)
    make_estimate(client.id, "EST-2025-001", "100", EstimateStatus.DRAFT, created_at=base)
    make_estimate(client.id, "EST-2025-002", "200", EstimateStatus.SENT, created_at=base + dt.timedelta(days=1))
    make_estimate(client.id, "EST-2025-003", "50.01", EstimateStatus.DRAFT, created_at=base + dt.timedelta(days=2))

    stats = encode_payload(EstimateTools(store).get_estimate_statistics())

    assert stats["TotalEstimates"] == 3
    assert stats["TotalValue"] == "350.01"
    assert stats["AverageValue"] == "116.67"
    assert stats["StatusBreakdown"] == [
        {"Status": "Draft", "Count": 2, "TotalValue": "150.01"},
        {"Status": "Sent", "Count": 1, "TotalValue": "200.00"},
    ]
    assert [item["EstimateNumber"] for item in stats["RecentEstimates"]] == [
        "EST-2025-003",
        "EST-2025-002",
        "EST-2025-001",
    ]


def test_statistics_recent_estimates_capped_at_five(seeded_store):
    stats = encode_payload(EstimateTools(seeded_store).get_estimate_statistics())
    assert stats["TotalEstimates"] == 6
    assert stats["TotalValue"] == "347500.00"
    assert len(stats["RecentEstimates"]) == 5
    counts = [item["Count"] for item in stats["StatusBreakdown"]]
    assert counts == sorted(counts, reverse=True)


def test_financial_summary_totals(seeded_store):
    smith = _client_named(seeded_store, "Smith Residence")
    summary = encode_payload(InvoiceTools(seeded_store).get_client_financial_summary(smith.id))

    assert summary["ClientId"] == smith.id
    assert summary["ClientName"] == "Smith Residence"
    assert summary["Estimates"]["Total"] == 2
    assert summary["Estimates"]["TotalValue"] == "77000.00"
    assert summary["Invoices"]["TotalBilled"] == "33750.00"
    assert summary["Invoices"]["TotalPaid"] == "22500.00"
    assert summary["Invoices"]["TotalOutstanding"] == "11250.00"
    assert summary["Invoices"]["OverdueInvoices"] == []
    assert len(summary["RecentActivity"]["RecentEstimates"]) == 2
    assert len(summary["RecentActivity"]["RecentInvoices"]) == 2


def test_financial_summary_billed_equals_paid_plus_outstanding(seeded_store):
    tools = InvoiceTools(seeded_store)
    for client in seeded_store.list_clients():
        invoices = encode_payload(tools.get_client_financial_summary(client.id))["Invoices"]
        assert Decimal(invoices["TotalBilled"]) == Decimal(invoices["TotalPaid"]) + Decimal(
            invoices["TotalOutstanding"]
        )
        assert sum(group["Count"] for group in invoices["ByStatus"]) == invoices["Total"]


def test_financial_summary_overdue_days(seeded_store):
    riverside = _client_named(seeded_store, "Riverside Restaurant Group")
    invoices = encode_payload(InvoiceTools(seeded_store).get_client_financial_summary(riverside.id))["Invoices"]

    assert invoices["TotalOutstanding"] == "1850.00"
    assert invoices["ByStatus"] == [{"Status": "Overdue", "Count": 1, "TotalAmount": "1850.00"}]
    [overdue] = invoices["OverdueInvoices"]
    assert overdue["Amount"] == "1850.00"
    assert overdue["DaysOverdue"] == 5


def test_financial_summary_recent_activity_capped_at_three(seeded_store):
    johnson = _client_named(seeded_store, "Johnson Commercial Properties")
    summary = encode_payload(InvoiceTools(seeded_store).get_client_financial_summary(johnson.id))
    recent = summary["RecentActivity"]["RecentInvoices"]
    assert len(recent) == 3
    assert [item["Status"] for item in recent] == ["Sent", "Paid", "Paid"]
    assert summary["Invoices"]["ByStatus"][0]["Status"] == InvoiceStatus.SENT.value


def test_store_failures_become_error_payloads(store, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("database is locked")

    monkeypatch.setattr(store, "list_clients", boom)
    monkeypatch.setattr(store, "list_estimates", boom)

    assert encode_payload(ClientTools(store).list_clients()) == {
        "error": "Failed to retrieve clients",
        "details": "database is locked",
    }
    assert encode_payload(EstimateTools(store).get_estimate_statistics()) == {
        "error": "Failed to retrieve estimate statistics",
        "details": "database is locked",
    }


def test_statistics_average_is_not_rounded(store, make_client, make_estimate):
    client = make_client()
    make_estimate(client.id, "EST-2025-001", "100.00")
    make_estimate(client.id, "EST-2025-002", "0.01")

    stats = encode_payload(EstimateTools(store).get_estimate_statistics())

    assert stats["TotalValue"] == "100.01"
    assert Decimal(stats["AverageValue"]) == Decimal("50.005")
