"""
Tests for the domain services (categories, incomes, expenses, salaries, users).

Services are built with create_app_components over a tmp_path store,
exactly as an application would wire them.
"""

import asyncio

import pytest
from datetime import date
from decimal import Decimal

from finance_tracker.audit import AuditLogger
from finance_tracker.errors import ConflictError, NotFoundError
from finance_tracker.models import (
    CategoryCreate,
    CategoryUpdate,
    ExpenseCreate,
    ExpenseQuery,
    ExpenseUpdate,
    Income,
    IncomeCreate,
    IncomeQuery,
    IncomeUpdate,
    PaymentMethod,
    SalaryQuery,
    SalaryUpsert,
    UserCreate,
    UserUpdate,
)
from finance_tracker.models.audit import AuditEventType
from finance_tracker.models.records import MAX_AMOUNT
from finance_tracker.orchestrator import create_app_components
from finance_tracker.services import (
    CategoriesRepository,
    CategoriesService,
    UsersRepository,
    UsersService,
)
from finance_tracker.validation import validate_expense_update


def _income(day, amount="100", category_id="cat_1", description="Freelance"):
    return IncomeCreate(
        date=day,
        description=description,
        category_id=category_id,
        amount=Decimal(amount),
    )


def _expense(day, amount="50", category_id="cat_1", recurring=False, description="Market"):
    return ExpenseCreate(
        date=day,
        description=description,
        category_id=category_id,
        payment_method=PaymentMethod.DEBIT,
        amount=Decimal(amount),
        is_recurring=recurring,
    )


class TestCategoriesService:
    """Tests for category CRUD and name uniqueness."""
    
    def test_create_defaults_budget_to_zero(self, app):
        category = asyncio.run(app.categories.create_category("u1", CategoryCreate(name="Home")))
        assert category.id.startswith("cat_")
        assert category.user_id == "u1"
        assert category.budget == Decimal("0")
    
    def test_name_is_unique_per_user_ignoring_case(self, app):
        asyncio.run(app.categories.create_category("u1", CategoryCreate(name="Food")))
        with pytest.raises(ConflictError):
            asyncio.run(app.categories.create_category("u1", CategoryCreate(name="food")))
        assert len(asyncio.run(app.categories.list_categories("u1"))) == 1
    
    def test_other_users_names_do_not_conflict(self, app):
        asyncio.run(app.categories.create_category("u1", CategoryCreate(name="Food")))
        category = asyncio.run(app.categories.create_category("u2", CategoryCreate(name="FOOD")))
        assert category.user_id == "u2"
    
    def test_list_is_sorted_by_name_and_scoped(self, app):
        for name in ("Transport", "home", "Leisure"):
            asyncio.run(app.categories.create_category("u1", CategoryCreate(name=name)))
        asyncio.run(app.categories.create_category("u2", CategoryCreate(name="Alpha")))
    
        names = [c.name for c in asyncio.run(app.categories.list_categories("u1"))]
        assert names == ["home", "Leisure", "Transport"]
    
    def test_rename_conflict(self, app):
        asyncio.run(app.categories.create_category("u1", CategoryCreate(name="Food")))
        other = asyncio.run(app.categories.create_category("u1", CategoryCreate(name="Home")))
        with pytest.raises(ConflictError):
            asyncio.run(app.categories.update_category("u1", other.id, CategoryUpdate(name="FOOD")))
    
    def test_rename_to_own_name_with_new_case(self, app):
        category = asyncio.run(app.categories.create_category("u1", CategoryCreate(name="food")))
        updated = asyncio.run(
            app.categories.update_category("u1", category.id, CategoryUpdate(name="Food"))
        )
        assert updated.name == "Food"
    
    def test_update_budget_keeps_name(self, app):
        category = asyncio.run(app.categories.create_category("u1", CategoryCreate(name="Home")))
        updated = asyncio.run(
            app.categories.update_category(
                "u1", category.id, CategoryUpdate(budget=Decimal("800"))
            )
        )
        assert updated.name == "Home"
        assert updated.budget == Decimal("800")
        assert asyncio.run(app.categories.get_category("u1", category.id)) == updated
    
    def test_other_users_category_is_not_found(self, app):
        category = asyncio.run(app.categories.create_category("u1", CategoryCreate(name="Home")))
        with pytest.raises(NotFoundError):
            asyncio.run(app.categories.get_category("u2", category.id))
        with pytest.raises(NotFoundError):
            asyncio.run(app.categories.update_category("u2", category.id, CategoryUpdate(name="X")))
        with pytest.raises(NotFoundError):
            asyncio.run(app.categories.delete_category("u2", category.id))
    
    def test_delete(self, app):
        category = asyncio.run(app.categories.create_category("u1", CategoryCreate(name="Home")))
        asyncio.run(app.categories.delete_category("u1", category.id))
        assert asyncio.run(app.categories.list_categories("u1")) == []
        with pytest.raises(NotFoundError):
            asyncio.run(app.categories.delete_category("u1", category.id))
    
    def test_concurrent_creates_with_same_name(self, app):
        """Exactly one of two racing creates with the same name succeeds."""
        async def scenario():
            return await asyncio.gather(
                app.categories.create_category("u1", CategoryCreate(name="Food")),
                app.categories.create_category("u1", CategoryCreate(name="FOOD")),
                return_exceptions=True,
            )
    
        results = asyncio.run(scenario())
        assert sum(isinstance(r, ConflictError) for r in results) == 1
        assert len(asyncio.run(app.categories.list_categories("u1"))) == 1


class TestIncomesService:
    """Tests for income CRUD and listing."""
    
    def test_list_is_most_recent_first(self, app):
        for day in (date(2025, 10, 1), date(2025, 10, 20), date(2025, 9, 30)):
            asyncio.run(app.incomes.create_income("u1", _income(day)))
        dates = [i.date for i in asyncio.run(app.incomes.list_incomes("u1"))]
        assert dates == [date(2025, 10, 20), date(2025, 10, 1), date(2025, 9, 30)]
    
    def test_list_filters(self, app):
        asyncio.run(app.incomes.create_income("u1", _income(date(2025, 9, 30))))
        asyncio.run(app.incomes.create_income("u1", _income(date(2025, 10, 1))))
        asyncio.run(app.incomes.create_income("u1", _income(date(2025, 10, 31), category_id="cat_2")))
        asyncio.run(app.incomes.create_income("u2", _income(date(2025, 10, 5))))
    
        october = asyncio.run(app.incomes.list_incomes(
            "u1", IncomeQuery(date_from=date(2025, 10, 1), date_to=date(2025, 10, 31))
        ))
        assert [i.date for i in october] == [date(2025, 10, 31), date(2025, 10, 1)]
    
        by_category = asyncio.run(app.incomes.list_incomes("u1", IncomeQuery(category_id="cat_2")))
        assert [i.category_id for i in by_category] == ["cat_2"]
    
    def test_update_merges_patch(self, app):
        income = asyncio.run(app.incomes.create_income("u1", _income(date(2025, 10, 1))))
        updated = asyncio.run(
            app.incomes.update_income("u1", income.id, IncomeUpdate(amount=Decimal("250.75")))
        )
        assert updated.amount == Decimal("250.75")
        assert updated.description == "Freelance"
        assert updated.date == date(2025, 10, 1)
    
    def test_largest_amount_survives_a_fresh_read(self, app, data_dir, hasher):
        income = asyncio.run(
            app.incomes.create_income("u1", _income(date(2025, 10, 1), amount="999999999999.99"))
        )
        reopened = create_app_components(data_dir=data_dir, hasher=hasher, configure_logs=False)
        stored = asyncio.run(reopened.incomes.get_income("u1", income.id))
        assert stored.amount == MAX_AMOUNT
    
    def test_amount_above_the_bound_is_rejected(self):
        with pytest.raises(ValueError):
            Income(
                id="inc_1",
                user_id="u1",
                date=date(2025, 10, 1),
                description="Windfall",
                category_id="cat_1",
                amount=Decimal("12345678901234567.89"),
            )
    
    def test_ownership_isolation(self, app):
        income = asyncio.run(app.incomes.create_income("u1", _income(date(2025, 10, 1))))
        with pytest.raises(NotFoundError):
            asyncio.run(app.incomes.get_income("u2", income.id))
        with pytest.raises(NotFoundError):
            asyncio.run(app.incomes.delete_income("u2", income.id))
        assert asyncio.run(app.incomes.get_income("u1", income.id)) == income
    
    def test_delete(self, app):
        income = asyncio.run(app.incomes.create_income("u1", _income(date(2025, 10, 1))))
        asyncio.run(app.incomes.delete_income("u1", income.id))
        assert asyncio.run(app.incomes.list_incomes("u1")) == []


class TestExpensesService:
    """Tests for expense CRUD and listing."""
    
    def test_create_stores_anchor_only(self, app):
        expense = asyncio.run(
            app.expenses.create_expense("u1", _expense(date(2025, 1, 31), recurring=True))
        )
        assert expense.id.startswith("exp_")
        assert expense.is_recurring is True
        assert len(asyncio.run(app.expenses.list_expenses("u1"))) == 1
    
    def test_recurring_filter(self, app):
        asyncio.run(app.expenses.create_expense("u1", _expense(date(2025, 9, 5), recurring=True)))
        asyncio.run(app.expenses.create_expense("u1", _expense(date(2025, 9, 12))))
    
        recurring = asyncio.run(app.expenses.list_expenses("u1", ExpenseQuery(recurring=True)))
        one_time = asyncio.run(app.expenses.list_expenses("u1", ExpenseQuery(recurring=False)))
        assert [e.date for e in recurring] == [date(2025, 9, 5)]
        assert [e.date for e in one_time] == [date(2025, 9, 12)]
    
    def test_list_is_most_recent_first_and_scoped(self, app):
        asyncio.run(app.expenses.create_expense("u1", _expense(date(2025, 9, 5))))
        asyncio.run(app.expenses.create_expense("u1", _expense(date(2025, 10, 5))))
        asyncio.run(app.expenses.create_expense("u2", _expense(date(2025, 11, 5))))
        dates = [e.date for e in asyncio.run(app.expenses.list_expenses("u1"))]
        assert dates == [date(2025, 10, 5), date(2025, 9, 5)]
    
    def test_update_can_clear_recurrence(self, app):
        expense = asyncio.run(
            app.expenses.create_expense("u1", _expense(date(2025, 9, 5), recurring=True))
        )
        updated = asyncio.run(
            app.expenses.update_expense("u1", expense.id, ExpenseUpdate(is_recurring=False))
        )
        assert updated.is_recurring is False
        assert updated.payment_method == PaymentMethod.DEBIT
    
    def test_update_can_clear_notes(self, app):
        created = _expense(date(2025, 9, 5)).model_copy(update={"notes": "split with Ana"})
        expense = asyncio.run(app.expenses.create_expense("u1", created))
        updated = asyncio.run(
            app.expenses.update_expense("u1", expense.id, validate_expense_update({"notes": None}))
        )
        assert updated.notes is None
        assert asyncio.run(app.expenses.get_expense("u1", expense.id)).notes is None
    
    def test_other_users_expense_is_not_found(self, app):
        expense = asyncio.run(app.expenses.create_expense("u1", _expense(date(2025, 9, 5))))
        with pytest.raises(NotFoundError):
            asyncio.run(app.expenses.update_expense("u2", expense.id, ExpenseUpdate(notes="x")))
        with pytest.raises(NotFoundError):
            asyncio.run(app.expenses.get_expense("u2", expense.id))
    
    def test_delete(self, app):
        expense = asyncio.run(app.expenses.create_expense("u1", _expense(date(2025, 9, 5))))
        with pytest.raises(NotFoundError):
            asyncio.run(app.expenses.delete_expense("u2", expense.id))
        asyncio.run(app.expenses.delete_expense("u1", expense.id))
        assert asyncio.run(app.expenses.list_expenses("u1")) == []


class TestSalariesService:
    """Tests for salary upserts."""
    
    def test_upsert_is_idempotent_per_period(self, app):
        first = asyncio.run(app.salaries.upsert_salary("u1", 2025, 10, SalaryUpsert(amount=Decimal("5000"))))
        second = asyncio.run(app.salaries.upsert_salary("u1", 2025, 10, SalaryUpsert(amount=Decimal("5200"))))
    
        assert first.id == second.id
        salaries = asyncio.run(app.salaries.list_salaries("u1"))
        assert len(salaries) == 1
        assert salaries[0].amount == Decimal("5200")
    
    def test_periods_and_users_are_independent(self, app):
        asyncio.run(app.salaries.upsert_salary("u1", 2025, 10, SalaryUpsert(amount=Decimal("1"))))
        asyncio.run(app.salaries.upsert_salary("u2", 2025, 10, SalaryUpsert(amount=Decimal("2"))))
        asyncio.run(app.salaries.upsert_salary("u1", 2025, 11, SalaryUpsert(amount=Decimal("3"))))
    
        assert asyncio.run(app.salaries.get_salary("u1", 2025, 10)).amount == Decimal("1")
        assert asyncio.run(app.salaries.get_salary("u2", 2025, 10)).amount == Decimal("2")
        assert len(asyncio.run(app.salaries.list_salaries("u1"))) == 2
    
    def test_list_is_chronological_and_filterable(self, app):
        for year, month in ((2025, 3), (2024, 12), (2025, 1)):
            asyncio.run(app.salaries.upsert_salary("u1", year, month, SalaryUpsert(amount=Decimal("10"))))
    
        periods = [(s.year, s.month) for s in asyncio.run(app.salaries.list_salaries("u1"))]
        assert periods == [(2024, 12), (2025, 1), (2025, 3)]
    
        only_2025 = asyncio.run(app.salaries.list_salaries("u1", SalaryQuery(year=2025)))
        assert [(s.year, s.month) for s in only_2025] == [(2025, 1), (2025, 3)]
    
    def test_missing_period_is_not_found(self, app):
        assert asyncio.run(app.salaries.find_salary("u1", 2025, 10)) is None
        with pytest.raises(NotFoundError):
            asyncio.run(app.salaries.get_salary("u1", 2025, 10))


class TestUsersService:
    """Tests for registration and self-service."""
    
    def test_register_normalizes_username(self, app):
        user = asyncio.run(app.users.register(UserCreate(name="Ana", username="  Ana.Silva ", password="secret1")))
        assert user.username == "ana.silva"
        assert user.id.startswith("usr_")
    
    def test_password_is_never_stored_in_plain_text(self, app, data_dir):
        asyncio.run(app.users.register(UserCreate(name="Ana", username="ana", password="secret1")))
        assert "secret1" not in (data_dir / "users.json").read_text(encoding="utf-8")
    
    def test_duplicate_username_conflicts(self, app):
        asyncio.run(app.users.register(UserCreate(name="Ana", username="ana", password="secret1")))
        with pytest.raises(ConflictError):
            asyncio.run(app.users.register(UserCreate(name="Other", username="ANA", password="secret2")))
    
    def test_validate_credentials(self, app):
        asyncio.run(app.users.register(UserCreate(name="Ana", username="ana", password="secret1")))
        assert asyncio.run(app.users.validate_credentials("ANA", "secret1")) is not None
        assert asyncio.run(app.users.validate_credentials("ana", "wrong-pass")) is None
        assert asyncio.run(app.users.validate_credentials("nobody", "secret1")) is None
    
    def test_update_me_changes_password(self, app):
        user = asyncio.run(app.users.register(UserCreate(name="Ana", username="ana", password="secret1")))
        updated = asyncio.run(app.users.update_me(user.id, UserUpdate(password="secret2")))
    
        assert updated.name == "Ana"
        assert asyncio.run(app.users.validate_credentials("ana", "secret1")) is None
        assert asyncio.run(app.users.validate_credentials("ana", "secret2")) is not None
    
    def test_profile_hides_password_hash(self, app):
        user = asyncio.run(app.users.register(UserCreate(name="Ana", username="ana", password="secret1")))
        profile = asyncio.run(app.users.get_profile(user.id))
        assert set(profile.model_dump()) == {"id", "name", "username"}
    
    def test_delete_me_keeps_owned_records(self, app):
        user = asyncio.run(app.users.register(UserCreate(name="Ana", username="ana", password="secret1")))
        asyncio.run(app.categories.create_category(user.id, CategoryCreate(name="Home")))
        asyncio.run(app.users.delete_me(user.id))
    
        assert asyncio.run(app.users.list_users()) == []
        assert len(asyncio.run(app.categories.list_categories(user.id))) == 1
        with pytest.raises(NotFoundError):
            asyncio.run(app.users.get_user(user.id))


class RecordingAuditLogger(AuditLogger):
    """Keeps events in memory instead of logging them."""
    
    def __init__(self):
        super().__init__()
        self.events = []
    
    async def log(self, event):
        self.events.append(event)


class TestAuditTrail:
    """Tests that mutations and reports are audited."""
    
    @pytest.fixture
    def audited(self, store, hasher):
        audit_logger = RecordingAuditLogger()
        components = create_app_components(store=store, hasher=hasher, configure_logs=False)
        components.categories = CategoriesService(CategoriesRepository(store), audit_logger)
        components.users = UsersService(UsersRepository(store), hasher, audit_logger)
        return components, audit_logger
    
    def test_mutations_are_audited(self, audited):
        app, audit_logger = audited
        category = asyncio.run(app.categories.create_category("u1", CategoryCreate(name="Home")))
        asyncio.run(app.categories.update_category("u1", category.id, CategoryUpdate(budget=Decimal("10"))))
        asyncio.run(app.categories.delete_category("u1", category.id))
        
        assert [e.event_type for e in audit_logger.events] == [
            AuditEventType.ENTITY_CREATED,
            AuditEventType.ENTITY_UPDATED,
            AuditEventType.ENTITY_DELETED,
        ]
        assert audit_logger.events[1].details == {"fields": ["budget"]}
    
    def test_failed_mutation_is_not_audited(self, audited):
        app, audit_logger = audited
        with pytest.raises(NotFoundError):
            asyncio.run(app.categories.delete_category("u1", "cat_missing"))
        assert audit_logger.events == []
    
    def test_secrets_never_reach_the_audit_trail(self, audited):
        app, audit_logger = audited
        asyncio.run(app.users.register(UserCreate(name="Ana", username="ana", password="secret1")))
        logged = str([e.to_log_dict() for e in audit_logger.events])
        assert "secret1" not in logged
        assert "pbkdf2" not in logged
