import importlib.util
from datetime import date
from pathlib import Path

from src.db.core import BusinessMetricDB, MonthlySalesDB, TransactionDB, UserDB
from tests.conftest import login

SEED_PATH = Path(__file__).resolve().parent.parent / "scripts" / "seed.py"


def _load_seed():
    spec = importlib.util.spec_from_file_location("seed", SEED_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_seed_populates_a_full_year_once(db_session):
    seed = _load_seed()
    last_year = date.today().year - 1

    assert seed.seed_database(db=db_session, users=1, year=last_year) == 1
    assert seed.seed_database(db=db_session, users=1, year=last_year) == 0

    user = db_session.query(UserDB).one()
    months = [row.month for row in db_session.query(MonthlySalesDB).order_by(MonthlySalesDB.month)]
    assert months == list(range(1, 13))
    assert db_session.query(TransactionDB).filter(TransactionDB.user_id == user.user_id).count() > 0
    assert db_session.query(BusinessMetricDB).filter(BusinessMetricDB.user_id == user.user_id).count() == 6


def test_seeded_user_can_use_the_dashboard(client, db_session):
    seed = _load_seed()
    last_year = date.today().year - 1
    seed.seed_database(db=db_session, users=1, year=last_year)
    email = db_session.query(UserDB).one().email

    assert login(client, email, password=seed.DEMO_PASSWORD).status_code == 200

    sales = client.get("/api/sales/monthly", params={"year": last_year}).json()
    assert [row["month_name"] for row in sales][:2] == ["January", "February"]
    assert client.get("/api/metrics/latest").json() != {}
