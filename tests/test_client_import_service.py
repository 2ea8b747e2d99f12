# tests/test_client_import_service.py
from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from crm.core.rbac import Forbidden
from crm.models.client import Client
from crm.models.user import Role
from crm.services.client_import_service import ClientImportService

from tests.factories import actor_of, make_user

HEADER = "full_name,company_name,phone,group_name,services,payment_amount,created_at"


def _csv(*rows: str) -> str:
    return "\n".join((HEADER, *rows))


def test_import_reports_each_row_and_keeps_good_ones(db):
    admin = make_user(db, role=Role.admin)
    text = _csv(
        "Anna,,+7 999 111-11-11,VIP,SMM;Website,1500,2024-03-10",
        ",,+7 999 222-22-22,,SMM,,",  # no name
        "Boris,Boris LLC,+7 999 333-33-33,,,,",  # no services
        ",Cafe Mir,+7 999 444-44-44,,Target,,",
    )

    result = ClientImportService(db).import_csv(text=text, actor=actor_of(admin))

    assert result.created == 2
    assert result.failed == 2
    assert [r.row for r in result.rows] == [2, 3, 4, 5]
    assert [r.success for r in result.rows] == [True, False, False, True]
    assert result.rows[0].name == "Anna"
    assert result.rows[3].name == "Cafe Mir"
    assert result.rows[1].error
    assert result.rows[0].client_id is not None

    assert db.scalar(select(func.count()).select_from(Client)) == 2


def test_import_parses_services_amount_and_date(db):
    admin = make_user(db, role=Role.admin)
    result = ClientImportService(db).import_csv(
        text=_csv("Anna,,+7 999 111-11-11,VIP, SMM ; Website ,1500.50,2024-03-10"),
        actor=actor_of(admin),
    )

    client = db.get(Client, result.rows[0].client_id)
    assert client.services == ["SMM", "Website"]
    assert client.payment_amount == Decimal("1500.50")
    assert client.group_name == "VIP"
    assert client.created_at.replace(tzinfo=None) == datetime(2024, 3, 10)


def test_import_bad_amount_fails_only_that_row(db):
    admin = make_user(db, role=Role.admin)
    result = ClientImportService(db).import_csv(
        text=_csv("Anna,,+7 999 111-11-11,,SMM,lots,", "Boris,,+7 999 222-22-22,,SMM,,"),
        actor=actor_of(admin),
    )
    assert [r.success for r in result.rows] == [False, True]
    assert "payment_amount" in result.rows[0].error


def test_import_skips_blank_lines(db):
    admin = make_user(db, role=Role.admin)
    result = ClientImportService(db).import_csv(
        text=_csv("Anna,,+7 999 111-11-11,,SMM,,", "", "Boris,,+7 999 222-22-22,,SMM,,"),
        actor=actor_of(admin),
    )
    assert result.created == 2
    assert [r.row for r in result.rows] == [2, 4]


def test_import_is_admin_only(db):
    sales = make_user(db, role=Role.sales_manager)
    with pytest.raises(Forbidden):
        ClientImportService(db).import_csv(text=_csv("Anna,,+7 999 111-11-11,,SMM,,"), actor=actor_of(sales))


def test_import_rows_are_source_line_numbers(db):
    admin = make_user(db, role=Role.admin)
    text = "\n\n" + _csv("Anna,,+7 999 111-11-11,,SMM,,")

    result = ClientImportService(db).import_csv(text=text, actor=actor_of(admin))

    assert result.created == 1
    assert [r.row for r in result.rows] == [4]


def test_import_multiline_cell_keeps_following_line_numbers(db):
    admin = make_user(db, role=Role.admin)
    text = _csv(
        'Anna,,+7 999 111-11-11,"VIP\nregular since 2020",SMM,,',
        "Boris,,+7 999 222-22-22,,SMM,,",
    )

    result = ClientImportService(db).import_csv(text=text, actor=actor_of(admin))

    assert [r.row for r in result.rows] == [2, 4]
    assert [r.success for r in result.rows] == [True, True]
    assert db.get(Client, result.rows[0].client_id).group_name == "VIP\nregular since 2020"
