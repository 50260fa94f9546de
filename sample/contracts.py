"""
Service contracts of the sample server.

The same contract classes describe the HTTP surface: every decorated
operation becomes a route when the contract is registered with
``add_dynamic_controller``.
"""

from abc import ABC, abstractmethod
from typing import Annotated, List, Optional

from dynapi import (
    FromBody,
    FromPath,
    FromQuery,
    HttpLoggingFields,
    delete,
    get,
    http_logging,
    ignore,
    information,
    post,
    put,
    require_authorization,
    tags,
)
from sample.models import Company, Person


@require_authorization("user")
@tags("people")
class IPeopleService(ABC):

    @get("/people")
    @abstractmethod
    async def get_people(self) -> List[Person]:
        pass

    @get("/people/search")
    @abstractmethod
    async def search_people(
        self,
        first_name: Annotated[Optional[str], FromQuery("FirstName")] = None,
        last_name: Annotated[Optional[str], FromQuery("LastName")] = None,
        company: Annotated[Optional[str], FromQuery("Company")] = None,
    ) -> List[Person]:
        pass

    @get("/people/company/{company}")
    @abstractmethod
    async def get_people_by_company(self, company: str) -> List[Person]:
        pass

    @get("/people/person/{id}")
    @abstractmethod
    async def get_person(self, id: Annotated[str, FromPath("id")]) -> Person:
        pass

    @post("/people/person")
    @abstractmethod
    async def create_person(self, person: Annotated[Person, FromBody()]) -> None:
        pass

    @require_authorization("admin")
    @delete("/people/person/{id}")
    @abstractmethod
    async def delete_person(self, id: Annotated[str, FromPath("id")]) -> None:
        pass

    @put("/people/person")
    @abstractmethod
    async def update_person(self, person: Annotated[Person, FromBody()]) -> None:
        pass

    @ignore
    @abstractmethod
    def count_people(self) -> int:
        """In-process helper, not exposed over HTTP"""
        pass


@information(description="API to access companies")
@http_logging(HttpLoggingFields.REQUEST_PROPERTIES | HttpLoggingFields.RESPONSE_STATUS_CODE | HttpLoggingFields.DURATION)
class ICompanyService(ABC):

    @information(description="Get companies", summary="Get all companies")
    @get("/companies")
    @abstractmethod
    def get_companies(self) -> List[Company]:
        pass

    @information(summary="Get company by id")
    @get("/companies/{id}")
    @abstractmethod
    def get_company(self, id: str) -> Company:
        pass

    @information(summary="Create a new company")
    @post("/companies")
    @abstractmethod
    def create_company(self, company: Company) -> None:
        pass

    @information(summary="Delete an existing company")
    @delete("/companies")
    @abstractmethod
    def delete_company(self, id: str) -> None:
        pass

    @information(summary="Update an existing company")
    @put("/companies")
    @abstractmethod
    def update_company(self, company: Company) -> None:
        pass
