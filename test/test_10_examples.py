# pylint: disable = missing-docstring

from typing import Any
import pytest
from smart_properties import (
    InvalidPropertyValueError,
    Property,
    RequiredPropertyError,
    SmartProperties,
)

class Person(SmartProperties):
    language_code = Property(
        accepts=["de", "en"],
        converts="lower",
        default="de",
        required=True,
    )

def test_person_example() -> None:
    assert Person().language_code == "de"
    assert Person(language_code="en").language_code == "en"
    assert Person(language_code="EN").language_code == "en"
    with pytest.raises(InvalidPropertyValueError):
        Person(language_code="fr")
    with pytest.raises(RequiredPropertyError):
        Person(language_code=None)
    person = Person()
    person.language_code = "En"
    assert person.language_code == "en"
    with pytest.raises(InvalidPropertyValueError):
        person.language_code = "fr"
    with pytest.raises(RequiredPropertyError):
        person.language_code = None
    assert person.language_code == "en"

def test_person_subclass_example() -> None:
    class Employee(Person):
        employee_id = Property(accepts=lambda self, value: value > 0, required=True)
    employee = Employee(employee_id=1)
    assert employee.language_code == "de"
    assert employee.employee_id == 1
    with pytest.raises(InvalidPropertyValueError):
        Employee(employee_id=-1)
    with pytest.raises(RequiredPropertyError):
        Employee()
    assert list(Person.properties()) == ["language_code"]

def test_configure_example() -> None:
    class Article(SmartProperties):
        title = Property(accepts=str, converts="strip", required=True)
        tags = Property(default=lambda self: [])
        language_code = Property(accepts=["de", "en"], default="en")
    def configure(article: Any) -> None:
        article.title = "  Properties  "
        article.language_code = "de"
    article = Article({"tags": ["python"]}, configure)
    assert article.title == "Properties"
    assert article.tags == ["python"]
    assert article.language_code == "de"
    assert Article(title="x").tags is not Article(title="y").tags
