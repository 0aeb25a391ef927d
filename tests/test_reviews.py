def test_create_and_list_reviews(client, make_user, make_product):
    user = make_user()
    product = make_product()

    first = client.post("/api/reviews", json={
        "product_id": product["id"], "user_id": user["id"], "rating": 5, "comment": "Great",
    })
    second = client.post("/api/reviews", json={
        "product_id": product["id"], "user_id": user["id"], "rating": 2, "comment": "Changed my mind",
    })

    assert first.status_code == 201
    assert second.status_code == 201
    assert first.json()["user_id"] == user["id"]
    reviews = client.get(f"/api/reviews/product/{product['id']}").json()
    assert [r["rating"] for r in reviews] == [5, 2]


def test_rating_must_be_between_one_and_five(client, make_user, make_product):
    user = make_user()
    product = make_product()

    for rating in (0, 6):
        response = client.post("/api/reviews", json={
            "product_id": product["id"], "user_id": user["id"], "rating": rating, "comment": "?",
        })
        assert response.status_code == 400


def test_review_unknown_product_or_user(client, make_user, make_product):
    user = make_user()
    product = make_product()

    no_product = client.post("/api/reviews", json={
        "product_id": 999, "user_id": user["id"], "rating": 3, "comment": "Hmm",
    })
    no_user = client.post("/api/reviews", json={
        "product_id": product["id"], "user_id": 999, "rating": 3, "comment": "Hmm",
    })

    assert no_product.status_code == 404
    assert no_user.status_code == 404


def test_reviews_of_unknown_product(client):
    response = client.get("/api/reviews/product/999")
    assert response.status_code == 200
    assert response.json() == []


def test_delete_review(client, make_user, make_product):
    user = make_user()
    product = make_product()
    review = client.post("/api/reviews", json={
        "product_id": product["id"], "user_id": user["id"], "rating": 4, "comment": "Good",
    }).json()

    assert client.delete(f"/api/reviews/{review['id']}").status_code == 204
    assert client.get(f"/api/reviews/product/{product['id']}").json() == []
    assert client.delete(f"/api/reviews/{review['id']}").status_code == 404
