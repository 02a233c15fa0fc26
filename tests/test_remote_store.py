from storefront.domain.result import ErrorKind
from storefront.domain.schemas import CartItem, WishlistItem


def test_fetch_missing_document_is_not_found(remote):
    result = remote.fetch("u1", "cart")

    assert not result.ok
    assert result.kind == ErrorKind.NOT_FOUND


def test_fetch_document_without_field_is_empty(remote, documents):
    documents.docs["u1"] = {"email": "a@example.com"}

    result = remote.fetch("u1", "wishlist")

    assert result.ok
    assert result.items == []


def test_fetch_transport_failure(remote, documents):
    documents.fail_gets = True

    result = remote.fetch("u1", "cart")

    assert not result.ok
    assert result.kind == ErrorKind.TRANSPORT_FAILURE


def test_fetch_non_list_field_is_empty(remote, documents):
    documents.docs["u1"] = {"cart": {"id": "p1"}}

    assert remote.fetch("u1", "cart").items == []


def test_fetch_non_object_document_is_malformed(remote, documents):
    documents.docs["u1"] = ["p1", "p2"]

    result = remote.fetch("u1", "cart")

    assert result.kind == ErrorKind.MALFORMED_DATA
    assert remote.latest("u1", "cart").kind == ErrorKind.MALFORMED_DATA


def test_add_one_creates_document(remote, documents):
    result = remote.add_one("u1", "cart", CartItem(id="p1", name="Basil"))

    assert result.ok
    assert documents.ids("u1", "cart") == ["p1"]


def test_add_one_existing_cart_item_keeps_remote_copy(remote, documents):
    documents.docs["u1"] = {
        "cart": [{"id": "p1", "name": "Basil", "quantity": 2, "addedAt": "2024-01-01T00:00:00+00:00"}]
    }

    result = remote.add_one("u1", "cart", CartItem(id="p1", name="Basil", quantity=3))

    assert result.ok
    assert not result.changed
    assert documents.merge_calls == 0
    stored = documents.docs["u1"]["cart"]
    assert len(stored) == 1
    assert stored[0]["quantity"] == 2
    assert stored[0]["addedAt"] == "2024-01-01T00:00:00+00:00"


def test_add_one_existing_wishlist_item_does_not_write(remote, documents):
    documents.docs["u1"] = {"wishlist": [{"id": "w1", "name": "Fern"}]}

    result = remote.add_one("u1", "wishlist", WishlistItem(id="w1", name="Fern"))

    assert result.ok
    assert [i.id for i in result.items] == ["w1"]
    assert documents.merge_calls == 0


def test_remove_one_missing_item(remote, documents):
    documents.docs["u1"] = {"cart": [{"id": "p1"}]}

    result = remote.remove_one("u1", "cart", "missing")

    assert not result.ok
    assert result.kind == ErrorKind.NOT_FOUND
    assert documents.merge_calls == 0


def test_update_one_sets_and_floors_quantity(remote, documents):
    documents.docs["u1"] = {"cart": [{"id": "p1", "quantity": 1}, {"id": "p2", "quantity": 1}]}

    updated = remote.update_one("u1", "cart", "p1", {"quantity": 4})
    removed = remote.update_one("u1", "cart", "p2", {"quantity": 0})

    assert updated.ok and removed.ok
    assert [(e["id"], e["quantity"]) for e in documents.docs["u1"]["cart"]] == [("p1", 4)]


def test_replace_leaves_other_fields_untouched(remote, documents):
    documents.docs["u1"] = {"wishlist": [{"id": "w1"}], "email": "a@example.com"}

    remote.replace("u1", "cart", [CartItem(id="p1")])

    assert documents.ids("u1", "wishlist") == ["w1"]
    assert documents.docs["u1"]["email"] == "a@example.com"


def test_replace_transport_failure(remote, documents):
    documents.fail_merges = True

    result = remote.replace("u1", "cart", [CartItem(id="p1")])

    assert not result.ok
    assert result.kind == ErrorKind.TRANSPORT_FAILURE
    assert "u1" not in documents.docs
