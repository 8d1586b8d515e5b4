"""Customer and vendor repositories."""

from __future__ import annotations

from ledgerdesk.models import Customer, Vendor
from ledgerdesk.repositories.base import Repository
from ledgerdesk.repositories.filters import Criterion, PartyFilters


class CustomerRepository(Repository[Customer, PartyFilters]):
    model = Customer

    def criteria(self, filters: PartyFilters) -> list[Criterion]:
        return [
            Criterion(Customer.company_id, filters.company_id),
            Criterion(Customer.is_active, filters.is_active),
        ]


class VendorRepository(Repository[Vendor, PartyFilters]):
    model = Vendor

    def criteria(self, filters: PartyFilters) -> list[Criterion]:
        return [
            Criterion(Vendor.company_id, filters.company_id),
            Criterion(Vendor.is_active, filters.is_active),
        ]
