from conftest import API, create_car, create_package, create_payment, create_service


def unpaid_ids(client, headers):
    response = client.get(f"{API}/service-packages/unpaid", headers=headers)
    assert response.status_code == 200
    return [s["id"] for s in response.json()["data"]]


def test_wash_to_payment_scenario(client, auth_headers):
    car = create_car(client, auth_headers, plate="RAB123A")
    package = create_package(client, auth_headers, name="Premium Wash", price=10000)
    service = create_service(client, auth_headers, car["id"], package["id"])

    assert service["status"] == "pending"
    assert service["recordNumber"] == f"SP-{service['id']:05d}"
    assert service["car"]["plateNumber"] == "RAB123A"
    assert service["package"]["packageName"] == "Premium Wash"
    assert unpaid_ids(client, auth_headers) == [service["id"]]

    response = create_payment(client, auth_headers, service["id"], amount=10000,
                              method="cash", payment_date="2025-01-10")
    assert response.status_code == 201, response.text
    payment = response.json()["data"]
    assert payment["paymentNumber"] == f"PAY-{payment['id']:05d}"
    assert payment["servicePackage"]["id"] == service["id"]

    assert unpaid_ids(client, auth_headers) == []

    bill = client.get(f"{API}/payments/bill/{service['id']}", headers=auth_headers).json()["data"]
    assert bill["payment"]["status"] == "Paid"
    assert bill["payment"]["amountPaid"] == 10000
    assert bill["payment"]["paymentMethod"] == "cash"
    assert bill["service"]["status"] == "paid"
    assert bill["billDate"] == "2025-01-10"
    assert bill["companyLocation"]


def test_second_payment_is_rejected(client, auth_headers):
    car = create_car(client, auth_headers)
    package = create_package(client, auth_headers)
    service = create_service(client, auth_headers, car["id"], package["id"])

    assert create_payment(client, auth_headers, service["id"]).status_code == 201

    response = create_payment(client, auth_headers, service["id"])
    assert response.status_code == 409
    assert response.json() == {"message": "Service has already been paid"}
    assert client.get(f"{API}/payments", headers=auth_headers).json()["count"] == 1


def test_payment_against_service_marked_paid_is_rejected(client, auth_headers):
    car = create_car(client, auth_headers)
    package = create_package(client, auth_headers)
    service = create_service(client, auth_headers, car["id"], package["id"], status="paid")

    assert unpaid_ids(client, auth_headers) == []
    assert create_payment(client, auth_headers, service["id"]).status_code == 409


def test_payment_amount_defaults_to_package_price(client, auth_headers):
    car = create_car(client, auth_headers)
    package = create_package(client, auth_headers, price=7500)
    service = create_service(client, auth_headers, car["id"], package["id"])

    response = create_payment(client, auth_headers, service["id"], method="mobile_money")

    assert response.status_code == 201
    assert response.json()["data"]["amountPaid"] == 7500
    assert response.json()["data"]["paymentMethod"] == "mobile_money"


def test_payment_for_missing_service(client, auth_headers):
    response = create_payment(client, auth_headers, 404)
    assert response.status_code == 404
    assert response.json() == {"message": "Service record not found"}


def test_invalid_payment_method(client, auth_headers):
    response = client.post(f"{API}/payments", json={
        "servicePackageId": 1, "paymentMethod": "cheque",
    }, headers=auth_headers)
    assert response.status_code == 400


def test_pending_bill(client, auth_headers):
    car = create_car(client, auth_headers)
    package = create_package(client, auth_headers, price=10000)
    service = create_service(client, auth_headers, car["id"], package["id"], service_date="2025-01-09")

    first = client.get(f"{API}/payments/bill/{service['id']}", headers=auth_headers)
    second = client.get(f"{API}/payments/bill/{service['id']}", headers=auth_headers)

    assert first.status_code == 200
    assert first.json() == second.json()
    bill = first.json()["data"]
    assert bill["payment"]["status"] == "Pending"
    assert bill["payment"]["amountDue"] == 10000
    assert bill["billDate"] == "2025-01-09"


def test_bill_for_missing_service(client, auth_headers):
    response = client.get(f"{API}/payments/bill/999", headers=auth_headers)
    assert response.status_code == 404
    assert response.json() == {"message": "Service record not found"}


def test_status_updates(client, auth_headers):
    car = create_car(client, auth_headers)
    package = create_package(client, auth_headers)
    service = create_service(client, auth_headers, car["id"], package["id"])
    url = f"{API}/service-packages/{service['id']}"

    for status in ("in-progress", "completed", "pending"):
        response = client.put(url, json={"status": status}, headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["data"]["status"] == status


def test_service_references_do_not_change(client, auth_headers):
    car = create_car(client, auth_headers)
    other_car = create_car(client, auth_headers, plate="RAC999Z")
    package = create_package(client, auth_headers)
    service = create_service(client, auth_headers, car["id"], package["id"])

    response = client.put(f"{API}/service-packages/{service['id']}", json={
        "carId": other_car["id"], "status": "completed",
    }, headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["data"]["carId"] == car["id"]
    assert response.json()["data"]["status"] == "completed"


def test_paid_service_cannot_go_back(client, auth_headers):
    car = create_car(client, auth_headers)
    package = create_package(client, auth_headers)
    service = create_service(client, auth_headers, car["id"], package["id"])
    create_payment(client, auth_headers, service["id"])

    response = client.put(f"{API}/service-packages/{service['id']}", json={"status": "pending"},
                          headers=auth_headers)

    assert response.status_code == 409
    assert response.json() == {"message": "Cannot change status from 'paid' to 'pending'"}


def test_service_requires_existing_car_and_package(client, auth_headers):
    package = create_package(client, auth_headers)
    response = client.post(f"{API}/service-packages", json={
        "carId": 42, "packageId": package["id"],
    }, headers=auth_headers)
    assert response.status_code == 404
    assert response.json() == {"message": "Car not found"}


def test_paid_service_cannot_be_deleted(client, auth_headers):
    car = create_car(client, auth_headers)
    package = create_package(client, auth_headers)
    paid = create_service(client, auth_headers, car["id"], package["id"])
    unpaid = create_service(client, auth_headers, car["id"], package["id"])
    create_payment(client, auth_headers, paid["id"])

    assert client.delete(f"{API}/service-packages/{paid['id']}", headers=auth_headers).status_code == 409
    assert client.delete(f"{API}/service-packages/{unpaid['id']}", headers=auth_headers).status_code == 200


def test_list_services_by_status(client, auth_headers):
    car = create_car(client, auth_headers)
    package = create_package(client, auth_headers)
    create_service(client, auth_headers, car["id"], package["id"])
    done = create_service(client, auth_headers, car["id"], package["id"], status="completed")

    response = client.get(f"{API}/service-packages", params={"status_filter": "completed"},
                          headers=auth_headers)

    assert response.json()["count"] == 1
    assert response.json()["data"][0]["id"] == done["id"]
