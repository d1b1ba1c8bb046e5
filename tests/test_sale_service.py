import pytest

from qrtag_admin.models.sale import SaleUpdate, TagSaleFilters
from qrtag_admin.services.backend_client import ApiResponse, Endpoint
from qrtag_admin.services.errors import ServiceError
from qrtag_admin.services.sale_service import SaleService, suggest_commissions


class TestSuggestCommissions:
    def test_affiliate(self):
        assert suggest_commissions(1000, "Affiliate") == pytest.approx((100, 40))

    def test_admin_roles_get_no_sales_person_commission(self):
        assert suggest_commissions(1000, "Support Admin") == pytest.approx((0, 40))


class TestSaleService:
    def test_list_params_and_rows(self, client):
        client.get.return_value = ApiResponse(
            data={"items": [{"_id": "s1", "paymentImageOrScreenShot": 5}], "total": 30, "page": 1}
        )
        result = SaleService(client).get_tag_sales(
            TagSaleFilters(sale_type="online", payment_status="all", search="abc", limit=10)
        )
        client.get.assert_called_once_with(
            Endpoint.QR_SALE_LIST, {"saleType": "online", "search": "abc", "limit": 10}
        )
        assert result["sales"][0]["paymentImageOrScreenShot"] is None
        assert result["pagination"]["pages"] == 3

    def test_detail_not_found(self, client):
        client.get.return_value = ApiResponse(data=None)
        with pytest.raises(ServiceError) as exc_info:
            SaleService(client).get_tag_sale_by_id("s1")
        assert exc_info.value.message == "Sale not found"

    def test_create_maps_references(self, client):
        client.post.return_value = ApiResponse(data={"_id": "s1", "tag": "t1"})
        sale = {
            "tag": {"_id": "t1", "shortCode": "abc"},
            "SalesPerson": "u1",
            "owner": {"_id": "o1"},
            "saleDate": "2025-11-15T00:00:00",
            "saleType": "offline",
            "salesPersonRole": "Affiliate",
            "totalSaleAmount": 2499,
            "commisionAmountOfSalesPerson": 249.9,
            "commisionAmountOfOwner": 99.96,
            "castAmountOfProductAndServices": 0,
            "paymentStatus": "pending",
            "varificationStatus": "pending",
            "message": [],
        }
        created = SaleService(client).create_tag_sale(sale)
        endpoint, payload = client.post.call_args.args
        assert endpoint == Endpoint.QR_SALE_CREATE
        assert payload["tagId"] == "t1"
        assert payload["salesPersonId"] == "u1"
        assert payload["ownerId"] == "o1"
        assert payload["castAmountOfProductAndServices"] == 0
        assert "message" not in payload
        assert "paymentImageOrScreenShot" not in payload
        assert "salesPersonRole" not in payload
        assert created["_id"] == "s1"

    def test_create_sends_message_and_image_when_present(self, client):
        client.post.return_value = ApiResponse(data={"_id": "s1"})
        SaleService(client).create_tag_sale(
            {"tag": "t1", "message": [{"message": "paid cash"}], "paymentImageOrScreenShot": "img.png"}
        )
        payload = client.post.call_args.args[1]
        assert payload["message"] == [{"message": "paid cash"}]
        assert payload["paymentImageOrScreenShot"] == "img.png"

    def test_update_sends_only_provided_fields(self, client):
        client.put.return_value = ApiResponse(data={"_id": "s1", "paymentStatus": "completed"})
        changes = SaleUpdate(payment_status="completed", commision_amount_of_owner=0).to_changes()
        sale = SaleService(client).update_tag_sale("s1", changes)
        client.put.assert_called_once_with(
            f"{Endpoint.QR_SALE_UPDATE}/s1", {"paymentStatus": "completed", "commisionAmountOfOwner": 0}
        )
        assert sale["paymentStatus"] == "completed"

    def test_update_invalid_response(self, client):
        client.put.return_value = ApiResponse(data="ok")
        with pytest.raises(ServiceError) as exc_info:
            SaleService(client).update_tag_sale("s1", {"saleType": "online"})
        assert exc_info.value.code == "INVALID_RESPONSE"

    def test_delete(self, client):
        SaleService(client).delete_tag_sale("s1")
        client.delete.assert_called_once_with(f"{Endpoint.QR_SALE_DELETE}/s1")

    def test_delete_requires_id(self, client):
        with pytest.raises(ServiceError):
            SaleService(client).delete_tag_sale("")
        client.delete.assert_not_called()
