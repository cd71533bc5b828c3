"""
Unit tests for the product domain models
"""
import pytest
from pydantic import ValidationError

from gleaming_admin.domain.product import Product, ProductInput


def _input(**overrides):
    data = {
        "type": "silver",
        "name": "Oxidised Anklet",
        "description": "Pair of 92.5 silver anklets",
        "price": 1850,
        "category": "Anklets",
        "imageUrls": "https://cdn.example.com/a.jpg",
    }
    data.update(overrides)
    return ProductInput(**data)


class TestProductInput:
    """Test validation and document building"""

    def test_image_urls_split_on_newlines(self):
        payload = _input(imageUrls="https://cdn.example.com/a.jpg\n\n  https://cdn.example.com/b.jpg  \n")
        assert payload.image_urls == ["https://cdn.example.com/a.jpg", "https://cdn.example.com/b.jpg"]

    def test_sizes_split_on_commas(self):
        payload = _input(sizes="6, 7,, 8 ")
        assert payload.sizes == ["6", "7", "8"]

    def test_image_url_required(self):
        with pytest.raises(ValidationError):
            _input(imageUrls="\n  \n")

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError):
            _input(name="   ")

    def test_negative_stock_rejected(self):
        with pytest.raises(ValidationError):
            _input(stockQuantity=-1)

    def test_gold_defaults_to_price_on_request(self):
        payload = _input(type="gold", price=0)
        assert payload.price_on_request is True

    def test_silver_needs_a_price(self):
        with pytest.raises(ValidationError) as exc_info:
            _input(price=0)
        assert "Query for Rate" in str(exc_info.value)

    def test_silver_price_on_request_allows_zero_price(self):
        payload = _input(price=0, priceOnRequest=True)
        assert payload.price_on_request is True

    def test_document_uses_storefront_field_names(self):
        document = _input(stockQuantity=3, isBestseller=True).to_document()

        assert document["imageUrls"] == ["https://cdn.example.com/a.jpg"]
        assert document["stockQuantity"] == 3
        assert document["isBestseller"] is True
        assert document["priceOnRequest"] is False
        assert document["material"] == "Silver"
        assert document["type"] == "silver"

    def test_made_to_order_has_no_stock(self):
        document = _input(availability="MADE TO ORDER", stockQuantity=12).to_document()
        assert document["stockQuantity"] == 0

    def test_gold_material(self):
        assert _input(type="gold").to_document()["material"] == "Gold"


class TestProduct:
    """Test computed fields"""

    def test_display_image_url_extracts_first_url(self):
        product = Product(id="p1", image_urls=['<img src="https://cdn.example.com/x.jpg">'])
        assert product.display_image_url == "https://cdn.example.com/x.jpg"

    def test_display_image_url_placeholder(self):
        assert Product(id="p1").display_image_url.startswith("https://picsum.photos")
        assert Product(id="p1", image_urls=["not a url"]).display_image_url.startswith("https://picsum.photos")

    def test_low_stock(self):
        assert Product(id="p1", stock_quantity=9).is_low_stock is True
        assert Product(id="p1", stock_quantity=10).is_low_stock is False
        assert Product(id="p1").is_low_stock is False

    def test_to_dict_includes_computed_fields(self):
        data = Product(id="p1", stock_quantity=2).to_dict()
        assert data["is_low_stock"] is True
        assert "display_image_url" in data
