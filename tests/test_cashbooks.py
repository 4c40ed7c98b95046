# CASHBOOK/backend/tests/test_cashbooks.py : tests des cashbooks

from cashbook.models import models


class TestCashbookCrud:
    def test_create_cashbook(self, client, owner, category):
        response = client.post("/cashbooks/", json={
            "category_id": category["id"],
            "name": "Caisse"
        }, headers=owner["headers"])
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Caisse"
        assert data["status"] == "ACTIVE"
        assert data["owner_id"] == owner["user"]["id"]
        assert data["user_role"] == "OWNER"
        assert data["can_edit"] and data["can_archive"] and data["can_post"]

    def test_missing_name_gets_default(self, client, owner, category):
        response = client.post("/cashbooks/", json={"category_id": category["id"]}, headers=owner["headers"])
        assert response.status_code == 200
        assert response.json()["name"] == "Untitled Ledger"

    def test_blank_name_gets_default(self, client, owner, category):
        response = client.post("/cashbooks/", json={
            "category_id": category["id"],
            "name": "   "
        }, headers=owner["headers"])
        assert response.status_code == 200
        assert response.json()["name"] == "Untitled Ledger"

    def test_create_with_unknown_category(self, client, owner):
        response = client.post("/cashbooks/", json={"category_id": 999, "name": "X"}, headers=owner["headers"])
        assert response.status_code == 404

    def test_create_assigns_selected_staff(self, client, owner, make_staff, make_cashbook):
        staff = make_staff()
        cashbook = make_cashbook(staff_ids=[staff["user"]["id"], owner["user"]["id"]])

        staff_list = client.get(f"/cashbooks/{cashbook['id']}/staff/", headers=owner["headers"]).json()
        assert len(staff_list) == 1
        assert staff_list[0]["user_id"] == staff["user"]["id"]
        assert staff_list[0]["role"] == "EMPLOYEE"
        assert staff_list[0]["can_edit"] is True
        assert staff_list[0]["can_archive"] is False

    def test_staff_without_global_flag_cannot_create(self, client, make_staff, category):
        staff = make_staff()
        response = client.post("/cashbooks/", json={
            "category_id": category["id"],
            "name": "Interdit"
        }, headers=staff["headers"])
        assert response.status_code == 403

    def test_staff_with_global_flag_keeps_access(self, client, make_staff, make_cashbook):
        staff = make_staff(can_create_cashbooks=True, can_archive_cashbooks=True)
        cashbook = make_cashbook(name="Mon cashbook", headers=staff["headers"])
        assert cashbook["owner_id"] == staff["user"]["id"]
        assert cashbook["can_edit"] is True
        assert cashbook["can_archive"] is True

        listing = client.get("/cashbooks/", headers=staff["headers"]).json()
        assert [cb["name"] for cb in listing] == ["Mon cashbook"]

    def test_get_details_with_totals(self, client, owner, make_cashbook, post_entry):
        cashbook = make_cashbook()
        post_entry(cashbook["id"], "IN", 500)
        post_entry(cashbook["id"], "IN", 250.5)
        post_entry(cashbook["id"], "OUT", 100)
        post_entry(cashbook["id"], "NOTE", 9999)

        response = client.get(f"/cashbooks/{cashbook['id']}", headers=owner["headers"])
        assert response.status_code == 200
        data = response.json()
        assert data["total_in"] == 750.5
        assert data["total_out"] == 100
        assert data["balance"] == 650.5
        assert data["entries_count"] == 4

    def test_get_unknown_cashbook(self, client, owner):
        assert client.get("/cashbooks/12345", headers=owner["headers"]).status_code == 404

    def test_rename_requires_can_edit(self, client, owner, make_staff, make_cashbook):
        staff = make_staff()
        cashbook = make_cashbook(staff_ids=[staff["user"]["id"]])
        client.patch(f"/cashbooks/{cashbook['id']}/staff/{staff['user']['id']}",
                     json={"can_edit": False}, headers=owner["headers"])

        response = client.put(f"/cashbooks/{cashbook['id']}", json={"name": "Nouveau"}, headers=staff["headers"])
        assert response.status_code == 403

        response = client.put(f"/cashbooks/{cashbook['id']}", json={"name": "Nouveau"}, headers=owner["headers"])
        assert response.status_code == 200
        assert response.json()["name"] == "Nouveau"

    def test_rename_to_blank_rejected(self, client, owner, make_cashbook):
        cashbook = make_cashbook()
        response = client.put(f"/cashbooks/{cashbook['id']}", json={"name": "   "}, headers=owner["headers"])
        assert response.status_code == 400


class TestVisibility:
    def test_owner_sees_all_statuses(self, client, owner, make_cashbook):
        first = make_cashbook(name="Premier")
        make_cashbook(name="Second")
        client.post(f"/cashbooks/{first['id']}/status", json={"status": "COMPLETED"}, headers=owner["headers"])

        listing = client.get("/cashbooks/", headers=owner["headers"]).json()
        assert [cb["name"] for cb in listing] == ["Second", "Premier"]

    def test_staff_sees_only_assigned_active(self, client, owner, make_staff, make_cashbook):
        staff = make_staff()
        assigned = make_cashbook(name="Assigné", staff_ids=[staff["user"]["id"]])
        archived = make_cashbook(name="Archivé", staff_ids=[staff["user"]["id"]])
        make_cashbook(name="Autre")
        client.post(f"/cashbooks/{archived['id']}/status", json={"status": "COMPLETED"}, headers=owner["headers"])

        listing = client.get("/cashbooks/", headers=staff["headers"]).json()
        assert [cb["id"] for cb in listing] == [assigned["id"]]
        assert listing[0]["user_role"] == "EMPLOYEE"

        assert client.get(f"/cashbooks/{archived['id']}", headers=staff["headers"]).status_code == 404

    def test_unassigned_staff_denied(self, client, make_staff, make_cashbook):
        staff = make_staff()
        cashbook = make_cashbook()
        assert client.get("/cashbooks/", headers=staff["headers"]).json() == []
        assert client.get(f"/cashbooks/{cashbook['id']}", headers=staff["headers"]).status_code == 404
        assert client.get(f"/cashbooks/{cashbook['id']}/entries", headers=staff["headers"]).status_code == 404

    def test_filter_by_category(self, client, owner, make_cashbook):
        other = client.post("/categories/", json={"name": "Maison"}, headers=owner["headers"]).json()
        make_cashbook(name="Boutique")
        client.post("/cashbooks/", json={"category_id": other["id"], "name": "Courses"}, headers=owner["headers"])

        listing = client.get(f"/cashbooks/?category_id={other['id']}", headers=owner["headers"]).json()
        assert [cb["name"] for cb in listing] == ["Courses"]


class TestStatus:
    def test_toggle_without_status(self, client, owner, make_cashbook):
        cashbook = make_cashbook()
        url = f"/cashbooks/{cashbook['id']}/status"
        assert client.post(url, json={}, headers=owner["headers"]).json()["status"] == "COMPLETED"
        assert client.post(url, json={}, headers=owner["headers"]).json()["status"] == "ACTIVE"

    def test_archive_requires_staff_flag(self, client, owner, make_staff, make_cashbook):
        staff = make_staff()
        cashbook = make_cashbook(staff_ids=[staff["user"]["id"]])
        url = f"/cashbooks/{cashbook['id']}/status"

        assert client.post(url, json={"status": "COMPLETED"}, headers=staff["headers"]).status_code == 403

        client.patch(f"/cashbooks/{cashbook['id']}/staff/{staff['user']['id']}",
                     json={"can_archive": True}, headers=owner["headers"])
        response = client.post(url, json={"status": "COMPLETED"}, headers=staff["headers"])
        assert response.status_code == 200
        assert response.json()["status"] == "COMPLETED"


class TestRecycleBin:
    def test_soft_delete_and_restore(self, client, owner, make_staff, make_cashbook, post_entry, db_session):
        staff = make_staff()
        cashbook = make_cashbook(staff_ids=[staff["user"]["id"]])
        post_entry(cashbook["id"], "IN", 300)

        response = client.delete(f"/cashbooks/{cashbook['id']}", headers=owner["headers"])
        assert response.status_code == 200

        assert client.get("/cashbooks/", headers=owner["headers"]).json() == []
        assert client.get("/cashbooks/", headers=staff["headers"]).json() == []
        deleted = client.get("/cashbooks/deleted", headers=owner["headers"]).json()
        assert [cb["id"] for cb in deleted] == [cashbook["id"]]
        assert deleted[0]["deleted_by"] == owner["user"]["id"]

        # Les écritures sont conservées
        assert db_session.query(models.Entry).filter(models.Entry.cashbook_id == cashbook["id"]).count() == 1

        response = client.post(f"/cashbooks/{cashbook['id']}/restore", headers=owner["headers"])
        assert response.status_code == 200
        assert response.json()["is_deleted"] is False
        assert response.json()["deleted_at"] is None

        listing = client.get("/cashbooks/", headers=staff["headers"]).json()
        assert [cb["id"] for cb in listing] == [cashbook["id"]]
        details = client.get(f"/cashbooks/{cashbook['id']}", headers=staff["headers"]).json()
        assert details["balance"] == 300

    def test_staff_cannot_delete(self, client, owner, make_staff, make_cashbook):
        staff = make_staff()
        cashbook = make_cashbook(staff_ids=[staff["user"]["id"]])
        client.patch(f"/cashbooks/{cashbook['id']}/staff/{staff['user']['id']}",
                     json={"can_edit": True, "can_archive": True}, headers=owner["headers"])

        assert client.delete(f"/cashbooks/{cashbook['id']}", headers=staff["headers"]).status_code == 403
        assert client.get("/cashbooks/deleted", headers=staff["headers"]).status_code == 403

    def test_delete_twice(self, client, owner, make_cashbook):
        cashbook = make_cashbook()
        client.delete(f"/cashbooks/{cashbook['id']}", headers=owner["headers"])
        assert client.delete(f"/cashbooks/{cashbook['id']}", headers=owner["headers"]).status_code == 400

    def test_trashed_cashbook_is_read_only(self, client, owner, make_cashbook, post_entry, db_session):
        cashbook = make_cashbook(name="Caisse fermée")
        entry = post_entry(cashbook["id"], "IN", 300).json()
        client.delete(f"/cashbooks/{cashbook['id']}", headers=owner["headers"])

        details = client.get(f"/cashbooks/{cashbook['id']}", headers=owner["headers"]).json()
        assert details["can_post"] is False

        assert post_entry(cashbook["id"], "IN", 50).status_code == 400
        assert client.put(f"/cashbooks/{cashbook['id']}", json={"name": "Renommé"},
                          headers=owner["headers"]).status_code == 400
        assert client.post(f"/cashbooks/{cashbook['id']}/status", json={"status": "COMPLETED"},
                           headers=owner["headers"]).status_code == 400
        assert client.put(f"/entries/{entry['id']}", json={"amount": 1},
                          headers=owner["headers"]).status_code == 400
        assert client.delete(f"/entries/{entry['id']}", headers=owner["headers"]).status_code == 400

        db_session.expire_all()
        stored = db_session.query(models.Cashbook).filter(models.Cashbook.id == cashbook["id"]).one()
        assert stored.name == "Caisse fermée"
        assert stored.status == "ACTIVE"
        entries = db_session.query(models.Entry).filter(models.Entry.cashbook_id == cashbook["id"]).all()
        assert [(e.id, e.amount) for e in entries] == [(entry["id"], 300)]

        # Après restauration, les écritures sont de nouveau acceptées
        client.post(f"/cashbooks/{cashbook['id']}/restore", headers=owner["headers"])
        assert post_entry(cashbook["id"], "IN", 50).status_code == 200


class TestCategories:
    def test_categories_sorted_by_name(self, client, owner, category):
        client.post("/categories/", json={"name": "Atelier"}, headers=owner["headers"])
        names = [c["name"] for c in client.get("/categories/", headers=owner["headers"]).json()]
        assert names == ["Atelier", "Boutique"]

    def test_rename_category(self, client, owner, category):
        response = client.put(f"/categories/{category['id']}", json={"name": "Magasin"}, headers=owner["headers"])
        assert response.status_code == 200
        assert response.json()["name"] == "Magasin"

    def test_delete_category_in_use(self, client, owner, category, make_cashbook):
        make_cashbook()
        response = client.delete(f"/categories/{category['id']}", headers=owner["headers"])
        assert response.status_code == 400

    def test_delete_unused_category(self, client, owner, category):
        assert client.delete(f"/categories/{category['id']}", headers=owner["headers"]).status_code == 200
        assert client.get("/categories/", headers=owner["headers"]).json() == []

    def test_staff_cannot_create_category(self, client, make_staff):
        staff = make_staff()
        assert client.post("/categories/", json={"name": "X"}, headers=staff["headers"]).status_code == 403
