"""Tests for the QR payload interpreter."""

import pytest

from upi_tracker.models import BareAddress, InvalidPayload, MerchantDescriptor
from upi_tracker.payments import ParseError, QrPayloadInterpreter, interpret, parse_payment_uri


MERCHANT_QR = "upi://pay?pa=shop@bank&pn=Corner%20Store&mc=5411&tr=REF123&am=10.00&cu=INR"


class TestPaymentLinks:
    """Tests for full upi://pay links."""

    def test_merchant_link(self):
        """Test all parameters are extracted in order, amount included."""
        result = interpret(MERCHANT_QR)
        assert isinstance(result, MerchantDescriptor)
        assert result.payee_address == "shop@bank"
        assert result.display_name == "Corner Store"
        assert list(result.parameters.items()) == [
            ("pa", "shop@bank"),
            ("pn", "Corner Store"),
            ("mc", "5411"),
            ("tr", "REF123"),
            ("am", "10.00"),
            ("cu", "INR"),
        ]

    def test_unknown_parameters_preserved(self):
        """Test that parameter names outside any known set survive."""
        result = interpret("upi://pay?pa=shop@bank&sign=AbC%2B%3D&mode=02&orgid=000000")
        assert result.parameters["sign"] == "AbC+="
        assert result.parameters["mode"] == "02"
        assert result.parameters["orgid"] == "000000"

    def test_literal_plus_kept(self):
        """Test a raw '+' in a signed value is data, not a space."""
        result = interpret("upi://pay?pa=shop@bank&sign=ab+cd/ef==&tr=REF123")
        assert result.parameters["sign"] == "ab+cd/ef=="
        assert result.parameters["tr"] == "REF123"

    def test_key_without_value(self):
        result = interpret("upi://pay?pa=shop@bank&mode&&tr=")
        assert result.parameters == {"pa": "shop@bank", "mode": "", "tr": ""}

    def test_without_display_name(self):
        result = interpret("upi://pay?pa=friend@okbank")
        assert isinstance(result, MerchantDescriptor)
        assert result.display_name is None

    def test_scheme_is_case_insensitive(self):
        result = interpret("UPI://pay?pa=shop@bank")
        assert isinstance(result, MerchantDescriptor)

    def test_surrounding_whitespace_ignored(self):
        result = interpret("  upi://pay?pa=shop@bank\n")
        assert isinstance(result, MerchantDescriptor)

    def test_blank_values_kept(self):
        result = interpret("upi://pay?pa=shop@bank&tn=")
        assert result.parameters["tn"] == ""

    def test_repeated_key_keeps_first_position(self):
        result = interpret("upi://pay?pa=shop@bank&tr=A&mc=1&tr=B")
        assert list(result.parameters) == ["pa", "tr", "mc"]
        assert result.parameters["tr"] == "B"

    def test_missing_payee_is_invalid(self):
        """Test a link without 'pa' is rejected."""
        result = interpret("upi://pay?pn=Shop&am=10")
        assert isinstance(result, InvalidPayload)
        assert "pa" in result.reason

    def test_empty_payee_is_invalid(self):
        result = interpret("upi://pay?pa=&pn=Shop")
        assert isinstance(result, InvalidPayload)

    def test_parse_payment_uri_raises(self):
        """Test the raising variant."""
        with pytest.raises(ParseError):
            parse_payment_uri("upi://pay?pn=Shop")
        with pytest.raises(ParseError):
            parse_payment_uri("https://example.com/?pa=shop@bank")

    def test_custom_scheme(self):
        interpreter = QrPayloadInterpreter(scheme="testpay")
        assert isinstance(interpreter.interpret("testpay://pay?pa=a@b"), MerchantDescriptor)
        assert isinstance(interpreter.interpret("upi://pay"), InvalidPayload)


class TestBareAddresses:
    """Tests for scans that are just a payee address."""

    def test_bare_address(self):
        result = interpret("friend@okbank")
        assert result == BareAddress(address="friend@okbank")

    def test_bare_address_has_no_parameters(self):
        result = interpret("friend@okbank")
        assert not hasattr(result, "parameters")


class TestInvalidPayloads:
    """Tests for text that is neither a link nor an address."""

    @pytest.mark.parametrize("text", [
        "hello world",
        "https://example.com",
        "",
        "   ",
        "12345",
    ])
    def test_invalid(self, text):
        """Test that non-payment text never raises."""
        result = interpret(text)
        assert isinstance(result, InvalidPayload)

    def test_none(self):
        result = interpret(None)
        assert isinstance(result, InvalidPayload)
        assert result.reason == "Nothing was scanned"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
