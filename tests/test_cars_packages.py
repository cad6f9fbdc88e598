from conftest import API, create_car, create_package, create_service
from smartpark.routers import cars, packages


def test_create_and_list_cars(client, auth_headers):
    create_car(client, auth_headers, plate="rab123a")
    create_car(client, auth_headers, plate="RAC456B", carSize="SUV")

    response = client.get(f"{API}/cars", headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 2
    assert [car["plateNumber"] for car in body["data"]] == ["RAC456B", "RAB123A"]
    assert body["data"][0]["carSize"] == "SUV"


def test_duplicate_plate_is_rejected(client, auth_headers):
    create_car(client, auth_headers, plate="RAB123A")
    response = client.post(f"{API}/cars", json={
        "plateNumber": "rab123a", "carType": "Bus", "driverName": "Eric", "phoneNumber": "0788",
    }, headers=auth_headers)
    assert response.status_code == 400
    assert response.json() == {"message": "Plate number already registered"}


def test_invalid_car_size_is_rejected(client, auth_headers):
    response = client.post(f"{API}/cars", json={
        "plateNumber": "RAB123A", "carType": "Bus", "carSize": "Huge",
        "driverName": "Eric", "phoneNumber": "0788",
    }, headers=auth_headers)
    assert response.status_code == 400


def test_update_car_keeps_plate(client, auth_headers):
    car = create_car(client, auth_headers)

    response = client.put(f"{API}/cars/{car['id']}", json={
        "plateNumber": "CHANGED", "driverName": "Alice Uwase",
    }, headers=auth_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["plateNumber"] == "RAB123A"
    assert data["driverName"] == "Alice Uwase"
    assert data["carType"] == "Toyota Corolla"


def test_get_missing_car(client, auth_headers):
    response = client.get(f"{API}/cars/999", headers=auth_headers)
    assert response.status_code == 404
    assert response.json() == {"message": "Car not found"}


def test_delete_car(client, auth_headers):
    car = create_car(client, auth_headers)

    response = client.delete(f"{API}/cars/{car['id']}", headers=auth_headers)

    assert response.status_code == 200
    assert client.get(f"{API}/cars/{car['id']}", headers=auth_headers).status_code == 404


def test_delete_car_with_service_records_is_rejected(client, auth_headers):
    car = create_car(client, auth_headers)
    package = create_package(client, auth_headers)
    create_service(client, auth_headers, car["id"], package["id"])

    response = client.delete(f"{API}/cars/{car['id']}", headers=auth_headers)
    assert response.status_code == 409

    response = client.delete(f"{API}/packages/{package['id']}", headers=auth_headers)
    assert response.status_code == 409


def test_package_crud(client, auth_headers):
    package = create_package(client, auth_headers, number="PK010", name="Basic Wash", price=5000)
    assert package["packagePrice"] == 5000

    response = client.put(f"{API}/packages/{package['id']}", json={
        "packagePrice": 6000, "packageNumber": "PK999",
    }, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["data"]["packagePrice"] == 6000
    assert response.json()["data"]["packageNumber"] == "PK010"

    listing = client.get(f"{API}/packages", headers=auth_headers).json()
    assert listing["count"] == 1

    assert client.delete(f"{API}/packages/{package['id']}", headers=auth_headers).status_code == 200
    assert client.get(f"{API}/packages", headers=auth_headers).json()["count"] == 0


def test_package_price_must_not_be_negative(client, auth_headers):
    response = client.post(f"{API}/packages", json={
        "packageNumber": "PK011", "packageName": "Odd", "packagePrice": -1,
    }, headers=auth_headers)
    assert response.status_code == 400


def test_duplicate_package_number(client, auth_headers):
    create_package(client, auth_headers, number="PK001")
    response = client.post(f"{API}/packages", json={
        "packageNumber": "PK001", "packageName": "Other", "packagePrice": 1,
    }, headers=auth_headers)
    assert response.status_code == 400
    assert response.json() == {"message": "Package number already exists"}


def test_update_ignores_null_fields(client, auth_headers):
    car = create_car(client, auth_headers)
    package = create_package(client, auth_headers, price=5000)

    response = client.put(f"{API}/cars/{car['id']}", json={
        "driverName": None, "phoneNumber": "0799111222",
    }, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["data"]["driverName"] == "Jean Mugabo"
    assert response.json()["data"]["phoneNumber"] == "0799111222"

    response = client.put(f"{API}/packages/{package['id']}", json={
        "packageName": None, "packagePrice": None,
    }, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["data"]["packageName"] == "Premium Wash"
    assert response.json()["data"]["packagePrice"] == 5000


async def never_taken(db, value):
    return False


def test_duplicate_plate_caught_at_commit(client, auth_headers, monkeypatch):
    create_car(client, auth_headers, plate="RAB123A")
    monkeypatch.setattr(cars, "plate_taken", never_taken)

    response = client.post(f"{API}/cars", json={
        "plateNumber": "RAB123A", "carType": "Bus", "driverName": "Eric", "phoneNumber": "0788",
    }, headers=auth_headers)

    assert response.status_code == 400
    assert response.json() == {"message": "Plate number already registered"}
    assert client.get(f"{API}/cars", headers=auth_headers).json()["count"] == 1


def test_duplicate_package_number_caught_at_commit(client, auth_headers, monkeypatch):
    create_package(client, auth_headers, number="PK001")
    monkeypatch.setattr(packages, "package_number_taken", never_taken)

    response = client.post(f"{API}/packages", json={
        "packageNumber": "PK001", "packageName": "Other", "packagePrice": 1,
    }, headers=auth_headers)

    assert response.status_code == 400
    assert response.json() == {"message": "Package number already exists"}
