"""
Validation and persistence helpers for SQLAlchemy models

Controllers only ever call ``save``, ``update`` and ``destroy`` and read
``errors`` and ``model_name``; everything else in this module exists to
make those calls return a boolean outcome instead of raising.
"""
import re
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, List, Mapping, Optional, Sequence, Union

from sqlalchemy import inspect
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, object_session
from sqlalchemy.orm.attributes import set_committed_value

from minimalizer.core.exceptions import (DetachedResourceError, RecordNotFound,
                                         UnknownAttributeError)
from minimalizer.core.logging_config import LoggingConfig
from minimalizer.models.errors import BASE, Errors

logger = LoggingConfig.get_logger(__name__)

Context = Union[str, Sequence[str], None]


def underscore(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


@dataclass(frozen=True)
class ModelName:
    """Naming used for routes, params and translation keys"""
    name: str
    singular: str
    plural: str

    @property
    def route_key(self) -> str:
        return self.plural

    @property
    def param_key(self) -> str:
        return self.singular

    @property
    def i18n_key(self) -> str:
        return self.singular

    @property
    def human(self) -> str:
        return self.singular.replace("_", " ").capitalize()

    @classmethod
    def for_class(cls, model_class: type) -> "ModelName":
        singular = getattr(model_class, "__singular_name__", None) or underscore(model_class.__name__)
        plural = (
            getattr(model_class, "__plural_name__", None)
            or getattr(model_class, "__tablename__", None)
            or f"{singular}s"
        )
        return cls(name=model_class.__name__, singular=singular, plural=plural)


class _ModelNameDescriptor:
    def __get__(self, instance, owner) -> ModelName:
        return ModelName.for_class(owner)


def _applies(on: Context, context: Optional[str]) -> bool:
    if on is None:
        return True
    if isinstance(on, str):
        return on == context
    return context in on


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, dict)):
        return not value
    return False


class ResourceMixin:
    """Mixin for declarative models that gives them a boolean save/update/destroy API"""

    model_name = _ModelNameDescriptor()

    # Validation ----------------------------------------------------------

    @property
    def errors(self) -> Errors:
        errors = self.__dict__.get("_resource_errors")
        if errors is None:
            errors = Errors()
            self.__dict__["_resource_errors"] = errors
        return errors

    @property
    def validation_context(self) -> Optional[str]:
        return self.__dict__.get("_validation_context")

    def validate(self, context: Optional[str]):
        """Override to add errors; ``context`` is "create", "update" or a custom value"""

    def valid(self, context: Optional[str] = None) -> bool:
        """Run validations under a context and report whether no errors were added"""
        context = context or ("create" if self.new_record else "update")
        self.errors.clear()
        self.__dict__["_validation_context"] = context
        try:
            self.validate(context)
        finally:
            self.__dict__["_validation_context"] = None
        return not self.errors

    def invalid(self, context: Optional[str] = None) -> bool:
        return not self.valid(context)

    def validate_presence(self, *attributes: str, on: Context = None, message: Optional[str] = None):
        if not _applies(on, self.validation_context):
            return
        for attribute in attributes:
            if _is_blank(getattr(self, attribute, None)):
                self.errors.add(attribute, "blank", message=message)

    def validate_length(
        self,
        attribute: str,
        minimum: Optional[int] = None,
        maximum: Optional[int] = None,
        is_: Optional[int] = None,
        allow_none: bool = False,
        on: Context = None,
        message: Optional[str] = None,
    ):
        if not _applies(on, self.validation_context):
            return
        value = getattr(self, attribute, None)
        if value is None:
            if not allow_none:
                value = ""
            else:
                return
        if not hasattr(value, "__len__"):
            value = str(value)
        length = len(value)
        if is_ is not None and length != is_:
            self.errors.add(attribute, "wrong_length", message=message, count=is_)
        if minimum is not None and length < minimum:
            self.errors.add(attribute, "too_short", message=message, count=minimum)
        if maximum is not None and length > maximum:
            self.errors.add(attribute, "too_long", message=message, count=maximum)

    def validate_format(
        self,
        attribute: str,
        pattern: Union[str, "re.Pattern"],
        allow_none: bool = False,
        on: Context = None,
        message: Optional[str] = None,
    ):
        if not _applies(on, self.validation_context):
            return
        value = getattr(self, attribute, None)
        if value is None and allow_none:
            return
        if value is None or not re.search(pattern, str(value)):
            self.errors.add(attribute, "invalid", message=message, value=value)

    def validate_inclusion(
        self,
        attribute: str,
        choices: Iterable[Any],
        allow_none: bool = False,
        on: Context = None,
        message: Optional[str] = None,
    ):
        if not _applies(on, self.validation_context):
            return
        value = getattr(self, attribute, None)
        if value is None and allow_none:
            return
        if value not in list(choices):
            self.errors.add(attribute, "inclusion", message=message, value=value)

    def validate_numericality(
        self,
        attribute: str,
        greater_than: Optional[float] = None,
        less_than: Optional[float] = None,
        only_integer: bool = False,
        allow_none: bool = False,
        on: Context = None,
        message: Optional[str] = None,
    ):
        if not _applies(on, self.validation_context):
            return
        value = getattr(self, attribute, None)
        if value is None and allow_none:
            return
        try:
            number = int(value) if only_integer else float(value)
        except (TypeError, ValueError):
            self.errors.add(attribute, "not_a_number", message=message, value=value)
            return
        if greater_than is not None and not number > greater_than:
            self.errors.add(attribute, "greater_than", message=message, value=value, count=greater_than)
        if less_than is not None and not number < less_than:
            self.errors.add(attribute, "less_than", message=message, value=value, count=less_than)

    def validate_uniqueness(
        self,
        attribute: str,
        scope: Sequence[str] = (),
        on: Context = None,
        message: Optional[str] = None,
    ):
        if not _applies(on, self.validation_context):
            return
        session = object_session(self)
        value = getattr(self, attribute, None)
        if session is None or value is None:
            return
        model_class = type(self)
        with session.no_autoflush:
            query = session.query(model_class).filter(getattr(model_class, attribute) == value)
            for column in scope:
                query = query.filter(getattr(model_class, column) == getattr(self, column))
            for record in query.all():
                if record is not self:
                    self.errors.add(attribute, "taken", message=message, value=value)
                    return

    # State ---------------------------------------------------------------

    @property
    def new_record(self) -> bool:
        return not inspect(self).has_identity

    @property
    def destroyed(self) -> bool:
        return bool(self.__dict__.get("_destroyed"))

    @property
    def persisted(self) -> bool:
        return not (self.new_record or self.destroyed)

    def to_param(self) -> Optional[str]:
        identity = inspect(self).identity
        if identity is None:
            return None
        return "-".join(str(part) for part in identity)

    def assign_attributes(self, attributes: Optional[Mapping[str, Any]]):
        """Set several attributes at once; unknown names raise"""
        for key, value in (attributes or {}).items():
            if key.startswith("_") or not hasattr(type(self), key):
                raise UnknownAttributeError(self.model_name.name, key)
            setattr(self, key, value)

    # Persistence ---------------------------------------------------------

    def _resource_session(self, session: Optional[Session]) -> Session:
        session = session or object_session(self)
        if session is None:
            raise DetachedResourceError(
                f"{self.model_name.name} is not attached to a session; add it to one before saving"
            )
        return session

    def _withhold_changes(self):
        """Keep assigned values in memory but out of the next flush

        The record stays attached so a form can show what was submitted;
        the next commit or expire reloads the stored values.
        """
        state = inspect(self)
        for key in state.mapper.column_attrs.keys():
            attribute = state.attrs[key]
            if attribute.history.has_changes():
                set_committed_value(self, key, attribute.value)

    def save(self, context: Optional[str] = None, session: Optional[Session] = None) -> bool:
        """Validate and commit; False when validation or a constraint fails"""
        session = self._resource_session(session)
        if not self.valid(context):
            if self in session.new:
                session.expunge(self)
            elif not self.new_record:
                self._withhold_changes()
            logger.info(
                f"{self.model_name.name} failed validation",
                extra={"fields": list(self.errors)}
            )
            return False

        session.add(self)
        try:
            session.commit()
        except IntegrityError as e:
            session.rollback()
            logger.warning(f"{self.model_name.name} violated a database constraint: {e.orig}")
            self.errors.add(BASE, "invalid", message="violates a database constraint")
            return False
        return True

    def update(
        self,
        attributes: Optional[Mapping[str, Any]] = None,
        context: Optional[str] = None,
        session: Optional[Session] = None,
    ) -> bool:
        """Assign attributes and save"""
        self.assign_attributes(attributes)
        return self.save(context=context, session=session)

    def before_destroy(self) -> Optional[bool]:
        """Override to veto a destroy by returning False or adding errors"""
        return None

    def destroy(self, session: Optional[Session] = None) -> bool:
        """Delete and commit; False when vetoed or a constraint fails"""
        session = self._resource_session(session)
        self.errors.clear()
        if self.before_destroy() is False or self.errors:
            logger.info(f"{self.model_name.name} destroy was vetoed")
            return False

        session.delete(self)
        try:
            session.commit()
        except IntegrityError as e:
            session.rollback()
            logger.warning(f"{self.model_name.name} could not be destroyed: {e.orig}")
            self.errors.add(BASE, "restrict_dependent_destroy", record="records")
            return False
        self.__dict__["_destroyed"] = True
        return True


class ResourceCollection:
    """An ordered group of records that can be updated together"""

    def __init__(self, records: Iterable[ResourceMixin] = (), model_class: Optional[type] = None):
        self.records: List[ResourceMixin] = list(records)
        self.model_class = model_class

    @classmethod
    def query(cls, session: Session, model_class: type, *criteria, order_by=None) -> "ResourceCollection":
        query = session.query(model_class)
        if criteria:
            query = query.filter(*criteria)
        if order_by is not None:
            query = query.order_by(order_by)
        return cls(query.all(), model_class=model_class)

    @property
    def model_name(self) -> Optional[ModelName]:
        first = self.first()
        if first is not None:
            return type(first).model_name
        if self.model_class is not None:
            return self.model_class.model_name
        return None

    def first(self) -> Optional[ResourceMixin]:
        return self.records[0] if self.records else None

    def find(self, record_id: Any) -> ResourceMixin:
        for record in self.records:
            if record.to_param() == str(record_id):
                return record
        name = self.model_name.name if self.model_name else "record"
        raise RecordNotFound(name, record_id)

    def update(
        self,
        ids: Sequence[Any],
        attribute_values: Sequence[Mapping[str, Any]],
        context: Optional[str] = None,
    ) -> bool:
        """Update records by id in one transaction.

        Every record is assigned and validated so each one carries its own
        errors; changes are committed only when all of them are valid.
        """
        targets = [
            (self.find(record_id), attributes)
            for record_id, attributes in zip(ids, attribute_values)
        ]
        if not targets:
            return True

        outcomes = []
        for record, attributes in targets:
            record.assign_attributes(attributes)
            outcomes.append(record.valid(context))

        session = targets[0][0]._resource_session(None)
        if not all(outcomes):
            invalid = [record.to_param() for (record, _), ok in zip(targets, outcomes) if not ok]
            logger.info(f"Bulk update rejected; invalid records: {invalid}")
            session.rollback()
            return False

        try:
            session.commit()
        except IntegrityError as e:
            session.rollback()
            logger.warning(f"Bulk update violated a database constraint: {e.orig}")
            for record, _ in targets:
                record.errors.add(BASE, "invalid", message="violates a database constraint")
            return False
        return True

    def __iter__(self) -> Iterator[ResourceMixin]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)

    def __repr__(self):
        return f"<ResourceCollection {len(self.records)} record(s)>"
