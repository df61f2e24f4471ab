"""HTTP tests for loyalty points, gift cards, promotions and referrals."""

from fastapi import status


class TestLoyaltyRoutes:
    def _earn(self, client, headers, user_id: str, points: int):
        return client.post(
            "/api/loyalty-points",
            json={"user_id": user_id, "transaction_type": "EARNED", "points": points},
            headers=headers,
        )

    def test_admin_records_and_customer_reads_balance(
        self, client, auth_headers_admin, auth_headers_customer, customer_user
    ) -> None:
        assert self._earn(client, auth_headers_admin, customer_user.id, 250).status_code == 201

        response = client.get(
            f"/api/loyalty-points/user/{customer_user.id}/total", headers=auth_headers_customer
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "user_id": customer_user.id,
            "total_points": 250,
            "redemption_value": 2.5,
        }

    def test_customer_cannot_award_points(
        self, client, auth_headers_customer, customer_user
    ) -> None:
        response = self._earn(client, auth_headers_customer, customer_user.id, 1000)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_customer_cannot_read_other_ledger(
        self, client, auth_headers_other_customer, customer_user
    ) -> None:
        response = client.get(
            f"/api/loyalty-points/user/{customer_user.id}", headers=auth_headers_other_customer
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_overdrawn_redemption(self, client, auth_headers_admin, customer_user) -> None:
        self._earn(client, auth_headers_admin, customer_user.id, 10)

        response = client.post(
            "/api/loyalty-points",
            json={
                "user_id": customer_user.id,
                "transaction_type": "REDEEMED",
                "points": 50,
                "redemption_method": "GIFT_CARD",
            },
            headers=auth_headers_admin,
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Insufficient loyalty points for redemption."

    def test_transaction_visible_to_owner(
        self, client, auth_headers_admin, auth_headers_customer, auth_headers_other_customer, customer_user
    ) -> None:
        transaction_id = self._earn(client, auth_headers_admin, customer_user.id, 5).json()["id"]

        own = client.get(f"/api/loyalty-points/{transaction_id}", headers=auth_headers_customer)
        other = client.get(
            f"/api/loyalty-points/{transaction_id}", headers=auth_headers_other_customer
        )

        assert own.status_code == status.HTTP_200_OK
        assert other.status_code == status.HTTP_403_FORBIDDEN

    def test_admin_corrects_transaction(
        self, client, auth_headers_admin, auth_headers_customer, customer_user
    ) -> None:
        transaction_id = self._earn(client, auth_headers_admin, customer_user.id, 100).json()["id"]

        response = client.put(
            f"/api/loyalty-points/{transaction_id}",
            json={"points": 75, "description": "Corrected"},
            headers=auth_headers_admin,
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["points"] == 75
        total = client.get(
            f"/api/loyalty-points/user/{customer_user.id}/total", headers=auth_headers_customer
        )
        assert total.json()["total_points"] == 75

    def test_customer_cannot_correct_transaction(
        self, client, auth_headers_admin, auth_headers_customer, customer_user
    ) -> None:
        transaction_id = self._earn(client, auth_headers_admin, customer_user.id, 5).json()["id"]

        response = client.put(
            f"/api/loyalty-points/{transaction_id}",
            json={"points": 5000},
            headers=auth_headers_customer,
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_correcting_unknown_transaction(self, client, auth_headers_admin) -> None:
        response = client.put(
            "/api/loyalty-points/missing", json={"points": 1}, headers=auth_headers_admin
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestGiftCardRoutes:
    def test_issue_and_redeem(self, client, auth_headers_customer, customer_user) -> None:
        issued = client.post(
            "/api/gift-cards", json={"amount": "40.00"}, headers=auth_headers_customer
        )
        assert issued.status_code == status.HTTP_201_CREATED
        card = issued.json()
        assert card["purchased_by_user_id"] == customer_user.id
        assert len(card["code"]) == 12

        redeemed = client.post(
            "/api/gift-cards/redeem",
            json={"code": card["code"], "amount": "15.00"},
            headers=auth_headers_customer,
        )

        assert redeemed.status_code == status.HTTP_200_OK
        assert redeemed.json()["current_balance"] == 25.0

    def test_unknown_card(self, client, auth_headers_customer) -> None:
        response = client.get("/api/gift-cards/ABCDEF123456", headers=auth_headers_customer)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_non_positive_amount_rejected(self, client, auth_headers_customer) -> None:
        response = client.post("/api/gift-cards", json={"amount": "0"}, headers=auth_headers_customer)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "amount" in response.json()["errors"]

    def test_listing_is_admin_only(self, client, auth_headers_admin, auth_headers_customer) -> None:
        client.post("/api/gift-cards", json={"amount": "40.00"}, headers=auth_headers_customer)

        assert client.get("/api/gift-cards", headers=auth_headers_customer).status_code == 403
        assert len(client.get("/api/gift-cards", headers=auth_headers_admin).json()) == 1


class TestPromotionRoutes:
    def _create(self, client, headers, **overrides):
        payload = {
            "name": "Welcome",
            "promo_code": "welcome10",
            "discount_type": "FIXED_AMOUNT",
            "discount_value": "10.00",
        }
        payload.update(overrides)
        return client.post("/api/promotions", json=payload, headers=headers)

    def test_admin_creates_and_customer_applies(
        self, client, auth_headers_admin, auth_headers_customer, make_appointment
    ) -> None:
        created = self._create(client, auth_headers_admin)
        assert created.status_code == status.HTTP_201_CREATED
        assert created.json()["promo_code"] == "WELCOME10"
        appointment = make_appointment()

        quote = client.post(
            "/api/promotions/apply",
            json={"promo_code": "WELCOME10", "appointment_id": appointment.id},
            headers=auth_headers_customer,
        )

        assert quote.status_code == status.HTTP_200_OK
        assert quote.json()["discounted_amount"] == 40.0

    def test_percentage_over_100_rejected(self, client, auth_headers_admin) -> None:
        response = self._create(
            client, auth_headers_admin, discount_type="PERCENTAGE", discount_value="120"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_customer_cannot_create(self, client, auth_headers_customer) -> None:
        assert self._create(client, auth_headers_customer).status_code == 403

    def test_lookup_by_code(self, client, auth_headers_admin, auth_headers_customer) -> None:
        self._create(client, auth_headers_admin)

        response = client.get("/api/promotions/code/welcome10", headers=auth_headers_customer)

        assert response.json()["name"] == "Welcome"

    def test_active_listing(self, client, auth_headers_admin, auth_headers_customer) -> None:
        self._create(client, auth_headers_admin)
        self._create(client, auth_headers_admin, name="Paused", promo_code="PAUSED", is_active=False)

        active = client.get("/api/promotions/active", headers=auth_headers_customer).json()
        everything = client.get("/api/promotions/all", headers=auth_headers_admin).json()

        assert [p["promo_code"] for p in active] == ["WELCOME10"]
        assert len(everything) == 2


class TestReferralRoutes:
    def test_generate_and_complete(
        self, client, auth_headers_customer, auth_headers_other_customer, other_customer
    ) -> None:
        generated = client.post(
            "/api/referrals/generate",
            json={"referred_user_email": other_customer.email},
            headers=auth_headers_customer,
        )
        assert generated.status_code == status.HTTP_201_CREATED
        code = generated.json()["referral_code"]

        completed = client.post(
            f"/api/referrals/{code}/complete",
            json={"referred_user_id": other_customer.id},
            headers=auth_headers_other_customer,
        )

        assert completed.status_code == status.HTTP_200_OK
        assert completed.json()["status"] == "COMPLETED"

    def test_self_referral(self, client, auth_headers_customer, customer_user) -> None:
        code = client.post(
            "/api/referrals/generate", json={}, headers=auth_headers_customer
        ).json()["referral_code"]

        response = client.post(
            f"/api/referrals/{code}/complete",
            json={"referred_user_id": customer_user.id},
            headers=auth_headers_customer,
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Users cannot refer themselves."

    def test_listing_is_admin_only(self, client, auth_headers_customer) -> None:
        assert client.get("/api/referrals", headers=auth_headers_customer).status_code == 403
