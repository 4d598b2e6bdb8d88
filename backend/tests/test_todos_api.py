import pytest

from conftest import auth_header, register
from todoapp.storage.errors import StoreError
from todoapp.storage.todo_store import TodoStore

TODOS = "/api/v1/todos"


@pytest.fixture
def alice(client):
    return auth_header(register(client, email="alice@x.com", name="Alice").json()["token"])


@pytest.fixture
def bob(client):
    return auth_header(register(client, email="bob@x.com", name="Bob").json()["token"])


def create(client, headers, title="Buy milk", description="2 litres"):
    return client.post(TODOS, json={"title": title, "description": description}, headers=headers)


class TestCreate:
    def test_create(self, client, alice):
        response = create(client, alice)

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Todo created successfully"
        todo = body["todo"]
        assert todo["title"] == "Buy milk"
        assert todo["description"] == "2 litres"
        assert todo["completed"] is False
        assert set(todo) == {
            "id", "title", "description", "completed", "user_id", "created_at", "updated_at"
        }

    def test_description_is_optional(self, client, alice):
        response = client.post(TODOS, json={"title": "Just a title"}, headers=alice)
        assert response.status_code == 201
        assert response.json()["todo"]["description"] == ""

    @pytest.mark.parametrize("title", ["", "x" * 256, None])
    def test_invalid_title(self, client, alice, title):
        response = client.post(TODOS, json={"title": title}, headers=alice)

        assert response.status_code == 400
        assert "title" in response.json()["errors"]

    def test_requires_auth(self, client):
        assert client.post(TODOS, json={"title": "x"}).status_code == 401


class TestRead:
    def test_list_newest_first(self, client, alice):
        first = create(client, alice, title="first").json()["todo"]
        second = create(client, alice, title="second").json()["todo"]

        response = client.get(TODOS, headers=alice)

        assert response.status_code == 200
        ids = [todo["id"] for todo in response.json()["todos"]]
        assert ids == [second["id"], first["id"]]

    def test_list_is_scoped_to_owner(self, client, alice, bob):
        create(client, alice)
        assert client.get(TODOS, headers=bob).json() == {"todos": []}

    def test_get(self, client, alice):
        todo = create(client, alice).json()["todo"]
        response = client.get(f"{TODOS}/{todo['id']}", headers=alice)

        assert response.status_code == 200
        assert response.json()["todo"] == todo

    def test_get_other_users_todo(self, client, alice, bob):
        todo = create(client, alice).json()["todo"]
        response = client.get(f"{TODOS}/{todo['id']}", headers=bob)

        assert response.status_code == 404
        assert response.json() == {"error": "Todo not found"}

    @pytest.mark.parametrize(
        "todo_id", ["abc", "-1", "1.5", "4294967296", "99999999999999999999"]
    )
    def test_invalid_id(self, client, alice, todo_id):
        response = client.get(f"{TODOS}/{todo_id}", headers=alice)
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid todo ID"

    def test_zero_id_not_found(self, client, alice):
        response = client.get(f"{TODOS}/0", headers=alice)
        assert response.status_code == 404
        assert response.json() == {"error": "Todo not found"}

    def test_largest_id_not_found(self, client, alice):
        assert client.get(f"{TODOS}/4294967295", headers=alice).status_code == 404
        assert client.delete(f"{TODOS}/4294967295", headers=alice).status_code == 404

    def test_list_requires_auth(self, client):
        assert client.get(TODOS).status_code == 401


class TestUpdate:
    def test_partial_update(self, client, alice):
        todo = create(client, alice).json()["todo"]
        response = client.put(f"{TODOS}/{todo['id']}", json={"completed": True}, headers=alice)

        assert response.status_code == 200
        updated = response.json()["todo"]
        assert updated["completed"] is True
        assert updated["title"] == todo["title"]
        assert updated["description"] == todo["description"]

    def test_update_title_and_description(self, client, alice):
        todo = create(client, alice).json()["todo"]
        response = client.put(
            f"{TODOS}/{todo['id']}",
            json={"title": "Buy oat milk", "description": ""},
            headers=alice,
        )

        assert response.status_code == 200
        assert response.json()["todo"]["title"] == "Buy oat milk"
        assert response.json()["todo"]["description"] == ""

    def test_empty_title_rejected(self, client, alice):
        todo = create(client, alice).json()["todo"]
        response = client.put(f"{TODOS}/{todo['id']}", json={"title": ""}, headers=alice)
        assert response.status_code == 400

    def test_update_other_users_todo(self, client, alice, bob):
        todo = create(client, alice).json()["todo"]
        response = client.put(f"{TODOS}/{todo['id']}", json={"completed": True}, headers=bob)

        assert response.status_code == 404
        assert client.get(f"{TODOS}/{todo['id']}", headers=alice).json()["todo"]["completed"] is False


class TestDelete:
    def test_delete(self, client, alice):
        todo = create(client, alice).json()["todo"]
        response = client.delete(f"{TODOS}/{todo['id']}", headers=alice)

        assert response.status_code == 200
        assert response.json() == {"message": "Todo deleted successfully"}
        assert client.get(f"{TODOS}/{todo['id']}", headers=alice).status_code == 404
        assert client.get(TODOS, headers=alice).json() == {"todos": []}

    def test_delete_twice(self, client, alice):
        todo = create(client, alice).json()["todo"]
        client.delete(f"{TODOS}/{todo['id']}", headers=alice)
        assert client.delete(f"{TODOS}/{todo['id']}", headers=alice).status_code == 404

    def test_delete_other_users_todo(self, client, alice, bob):
        todo = create(client, alice).json()["todo"]
        assert client.delete(f"{TODOS}/{todo['id']}", headers=bob).status_code == 404
        assert client.get(f"{TODOS}/{todo['id']}", headers=alice).status_code == 200


class TestTodoStore:
    @pytest.mark.parametrize("todo_id", [2 ** 63, 2 ** 70])
    def test_out_of_range_id_is_store_error(self, db, todo_id):
        store = TodoStore(db)
        with pytest.raises(StoreError):
            store.find_by_id(1, todo_id)
        with pytest.raises(StoreError):
            store.soft_delete(1, todo_id)
