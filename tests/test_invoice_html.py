from storefront.invoice import render_invoice
from storefront.pdf.render import render_invoice_html
from storefront.schemas import Order


def test_markup_is_80mm_with_totals(order, issuer):
    html = render_invoice_html(render_invoice(order, issuer=issuer))
    assert "size: 80mm auto" in html
    assert "Invoice #INV-20240604-C0FFEE12" in html
    assert "Total GST:" in html
    assert "&#8377;296.50" in html
    assert "window.print" not in html


def test_auto_print_waits_for_load(order, issuer):
    html = render_invoice_html(
        render_invoice(order, issuer=issuer), auto_print=True, settle_ms=750, nonce="n0nce"
    )
    assert 'addEventListener("load"' in html
    assert "window.print(); }, 750)" in html
    assert '<script nonce="n0nce">' in html
    assert '<style nonce="n0nce">' in html


def test_markup_escapes_order_text(issuer, now):
    order = Order.model_validate(
        {"items": [{"quantity": 1, "product": {"name": "<b>Seeds</b>", "price": 10}}]}
    )
    html = render_invoice_html(render_invoice(order, issuer=issuer, now=now))
    assert "<b>Seeds</b>" not in html
    assert "&lt;b&gt;Seeds&lt;/b&gt;" in html
    assert "FREE" in html
