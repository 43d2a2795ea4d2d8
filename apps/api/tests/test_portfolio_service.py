from debtdesk.services import account_service, portfolio_service


def test_recompute_totals_counts_only_this_portfolio(db, test_org, test_portfolio, other_portfolio):
    for number, balance in (("A1", 10000), ("A2", 2550)):
        account_service.create_account(
            db,
            organization_id=test_org.id,
            portfolio_id=test_portfolio.id,
            account_number=number,
            first_name="Ann",
            last_name="Lee",
            original_balance=balance,
            current_balance=balance,
        )
    account_service.create_account(
        db,
        organization_id=test_org.id,
        portfolio_id=other_portfolio.id,
        account_number="B1",
        first_name="Bob",
        last_name="Ray",
        original_balance=99999,
    )

    portfolio = portfolio_service.recompute_totals(db, test_portfolio)

    assert portfolio.total_accounts == 2
    assert portfolio.total_face_value == 12550


def test_recompute_totals_empty_portfolio(db, test_portfolio):
    test_portfolio.total_accounts = 5
    test_portfolio.total_face_value = 500
    db.commit()

    portfolio = portfolio_service.recompute_totals(db, test_portfolio)

    assert (portfolio.total_accounts, portfolio.total_face_value) == (0, 0)


def test_custom_field_labels_merge(db, test_portfolio):
    portfolio_service.register_custom_field_labels(db, test_portfolio, {"custom1": "Branch"})
    portfolio = portfolio_service.register_custom_field_labels(
        db, test_portfolio, {"custom2": "Region"}
    )
    assert portfolio.custom_field_labels == {"custom1": "Branch", "custom2": "Region"}
