"""In-memory implementations of the sample contracts"""

import logging
from typing import List, Optional
from uuid import uuid4

from dynapi import DynamicAPIException
from sample.contracts import ICompanyService, IPeopleService
from sample.models import Company, Person

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return uuid4().hex


def _contains(value: str, fragment: Optional[str]) -> bool:
    return not fragment or fragment.casefold() in value.casefold()


class PeopleService(IPeopleService):
    """List-backed people directory"""

    def __init__(self):
        self._people: List[Person] = []
        for first_name, last_name, company in (
            ("Dagobert", "Duck", "ACME"),
            ("Seppl", "Kasperls Freund", "Kids Club"),
            ("Kasperl", "Seppls Freund", "Kids Club"),
            ("Räuber", "Hotzenplotz", "n.a."),
            ("Dimpfelmoser", "Wachtmeister", "Polizei"),
            ("Inspector", "Gadget", "Polizei"),
        ):
            self._add(Person(first_name=first_name, last_name=last_name, company=company))

    def _add(self, person: Person) -> Person:
        if not person.id:
            person = person.model_copy(update={"id": _new_id()})
        self._people.append(person)
        return person

    def _find(self, id: str) -> Optional[Person]:
        return next((p for p in self._people if p.id == id), None)

    async def get_people(self) -> List[Person]:
        return list(self._people)

    async def search_people(self, first_name=None, last_name=None, company=None) -> List[Person]:
        return [
            p for p in self._people
            if _contains(p.first_name, first_name)
            and _contains(p.last_name, last_name)
            and _contains(p.company, company)
        ]

    async def get_people_by_company(self, company: str) -> List[Person]:
        return [p for p in self._people if p.company.casefold() == company.casefold()]

    async def get_person(self, id: str) -> Person:
        person = self._find(id)
        if person is None:
            raise DynamicAPIException(404, "Person not found!")
        return person

    async def create_person(self, person: Person) -> None:
        created = self._add(person)
        logger.info(f"Created person {created.id}")

    async def delete_person(self, id: str) -> None:
        person = self._find(id)
        if person is not None:
            self._people.remove(person)
            logger.info(f"Deleted person {id}")

    async def update_person(self, person: Person) -> None:
        await self.delete_person(person.id)
        self._add(person)

    def count_people(self) -> int:
        return len(self._people)


class CompanyService(ICompanyService):
    """List-backed company registry with synchronous operations"""

    def __init__(self):
        self._companies: List[Company] = []
        for name in ("ACME", "Kids Club", "Polizei"):
            self.create_company(Company(name=name))

    def get_companies(self) -> List[Company]:
        return list(self._companies)

    def get_company(self, id: str) -> Company:
        for company in self._companies:
            if company.id == id:
                return company
        raise DynamicAPIException(404, "Company not found")

    def create_company(self, company: Company) -> None:
        if not company.id:
            company = company.model_copy(update={"id": _new_id()})
        self._companies.append(company)

    def delete_company(self, id: str) -> None:
        self._companies = [c for c in self._companies if c.id != id]

    def update_company(self, company: Company) -> None:
        self.delete_company(company.id)
        self.create_company(company)
