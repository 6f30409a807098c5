from fleetdesk.constants import MONTH_NAMES, PAYMENT_TYPE_LABELS, format_month


class TestMonthNames:
    def test_all_twelve_months(self):
        assert len(MONTH_NAMES) == 12

    def test_first_and_last(self):
        assert MONTH_NAMES[0] == "Jan"
        assert MONTH_NAMES[11] == "Dec"


class TestPaymentTypeLabels:
    def test_all_types(self):
        assert set(PAYMENT_TYPE_LABELS) == {"vehicle-acquisition", "driver-rental"}


class TestFormatMonth:
    def test_standard(self):
        assert format_month(3) == "Mar"

    def test_out_of_range(self):
        assert format_month(13) == "13"
        assert format_month(0) == "0"
