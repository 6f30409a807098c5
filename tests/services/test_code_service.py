from unittest.mock import MagicMock

import pytest
from freezegun import freeze_time

from fleetdesk.services.code_service import CodeGenerator, format_code, parse_code_number


class TestFormatCode:
    def test_company(self):
        assert format_code("company", 7) == "COMP-007"

    def test_driver_grows_past_width(self):
        assert format_code("driver", 1234) == "DRV-1234"

    def test_rental_embeds_year(self):
        assert format_code("rental", 12, 2026) == "RNT-2026-012"

    def test_rental_requires_year(self):
        with pytest.raises(ValueError, match="year is required"):
            format_code("rental", 1)

    def test_receipt(self):
        assert format_code("receipt", 1001) == "ESSA1001"

    def test_unknown_family(self):
        with pytest.raises(ValueError, match="Unknown code family"):
            format_code("invoice", 1)


class TestParseCodeNumber:
    def test_company(self):
        assert parse_code_number("company", "COMP-041") == 41

    def test_rental(self):
        assert parse_code_number("rental", "RNT-2025-117") == 117

    def test_receipt(self):
        assert parse_code_number("receipt", "ESSA1099") == 1099

    @pytest.mark.parametrize("code", [None, "", "COMP-", "DRV-001", "COMP-01a"])
    def test_non_matching(self, code):
        assert parse_code_number("company", code) is None


class TestCodeGeneratorUnit:
    def setup_method(self):
        self.repo = MagicMock()
        self.generator = CodeGenerator(self.repo)

    def test_uses_counter_value(self):
        self.repo.increment.return_value = 5
        assert self.generator.company_code() == "COMP-005"
        assert self.repo.increment.call_args.args[0] == "company"

    def test_seed_continues_after_last_code(self):
        self.repo.last_code.return_value = "DRV-009"
        self.repo.increment.side_effect = lambda family, seed: seed()

        assert self.generator.driver_code() == "DRV-010"
        self.repo.last_code.assert_called_once_with("driver", "DRV-")

    def test_seed_starts_at_family_start(self):
        self.repo.last_code.return_value = None
        self.repo.increment.side_effect = lambda family, seed: seed()
        assert self.generator.receipt_code() == "ESSA1001"

    def test_seed_never_goes_below_start(self):
        self.repo.last_code.return_value = "ESSA0005"
        self.repo.increment.side_effect = lambda family, seed: seed()
        assert self.generator.receipt_code() == "ESSA1001"

    @freeze_time("2026-06-15")
    def test_rental_counter_is_per_year(self):
        self.repo.last_code.return_value = None
        self.repo.increment.side_effect = lambda family, seed: seed()

        assert self.generator.rental_code() == "RNT-2026-001"
        assert self.repo.increment.call_args.args[0] == "rental-2026"
        self.repo.last_code.assert_called_with("rental", "RNT-2026-")

    def test_rental_explicit_year(self):
        self.repo.increment.return_value = 3
        assert self.generator.rental_code(2025) == "RNT-2025-003"
        assert self.repo.increment.call_args.args[0] == "rental-2025"


class TestCodeGeneratorDatabase:
    def test_receipt_codes_are_sequential(self, codes):
        assert codes.receipt_code() == "ESSA1001"
        assert codes.receipt_code() == "ESSA1002"

    def test_receipt_code_after_existing_payment(self, codes, repos, sample_payment):
        repos["payment"].create(sample_payment(receipt_code="ESSA1001"))
        assert codes.receipt_code() == "ESSA1002"

    def test_company_codes_continue_existing_data(self, codes, repos, sample_company):
        repos["company"].create(sample_company(company_code="COMP-014"))
        assert codes.company_code() == "COMP-015"
        assert codes.company_code() == "COMP-016"

    def test_rental_numbering_restarts_each_year(self, codes):
        assert codes.rental_code(2025) == "RNT-2025-001"
        assert codes.rental_code(2025) == "RNT-2025-002"
        assert codes.rental_code(2026) == "RNT-2026-001"
