"""Annotated data classes used as report roots in the tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Annotated, List, Optional

from pydantic import BaseModel

from keyreport import DataType, KeyType, ReportKey, report_key

TIMESTAMP = 1644924015000  # 2022-02-15 11:20:15 UTC


# Scenario: one text key and one list of labelled rows.
@dataclass
class Line:
    label: Optional[str] = report_key("label")


@dataclass
class Summary:
    title: Optional[str] = report_key("title")
    items: Optional[List[Line]] = report_key("items", key_type=KeyType.COMPLEX)


# Invoice with numbers, dates and temporary keys.
@dataclass
class Item:
    name: Optional[str] = report_key("item_name")
    quantity: Optional[float] = report_key("item_quantity", data_type=DataType.NUMERIC)
    note: Optional[str] = report_key("item_note", temporary=True)


@dataclass
class Invoice:
    number: Optional[str] = report_key("invoice_number")
    issued: Optional[int] = report_key("invoice_issued", data_type=DataType.DATE)
    remark: Optional[str] = report_key("invoice_remark", temporary=True)
    items: Optional[List[Item]] = report_key("invoice_items", key_type=KeyType.COMPLEX)
    extras: Optional[List[Item]] = report_key("invoice_extras", key_type=KeyType.COMPLEX, temporary=True)


# Every data type with derived key names.
@dataclass
class Point:
    x: Optional[str] = report_key(data_type=DataType.NUMERIC)
    y: Optional[float] = report_key(data_type=DataType.NUMERIC)


@dataclass
class DataSet:
    text: Optional[str] = report_key()
    temporary_key: Optional[str] = report_key(temporary=True)
    regular_key: Optional[str] = report_key()
    double_number: Optional[float] = report_key(data_type=DataType.NUMERIC)
    double_nan: float = report_key(data_type=DataType.NUMERIC, default=float("nan"))
    double_infinity: float = report_key(data_type=DataType.NUMERIC, default=float("inf"))
    default_date: Optional[int] = report_key(data_type=DataType.DATE)
    another_format_date: Optional[int] = report_key(data_type=DataType.DATE, date_format="yyyy-MM-dd")
    default_time: Optional[int] = report_key(data_type=DataType.TIME)
    another_format_time: Optional[int] = report_key(data_type=DataType.TIME, time_format="h:mm:ss aaa")
    image_path: Optional[str] = report_key(data_type=DataType.IMAGE)
    points: List[Point] = report_key(key_type=KeyType.COMPLEX, default_factory=list)
    custom_list: List[Point] = report_key("customKey", key_type=KeyType.COMPLEX, default_factory=list)


# Nested lists: departments, each with employees.
@dataclass
class Employee:
    name: Optional[str] = report_key("employee_name")


@dataclass
class Department:
    name: Optional[str] = report_key("department_name")
    employees: List[Employee] = report_key("employees", key_type=KeyType.COMPLEX, default_factory=list)


@dataclass
class Company:
    name: Optional[str] = report_key("company_name")
    departments: List[Department] = report_key("departments", key_type=KeyType.COMPLEX, default_factory=list)


# Two reachable fields resolving to the same name.
@dataclass
class Staff:
    name: Optional[str] = report_key("nameKey")


@dataclass
class Firm:
    name: Optional[str] = report_key("nameKey")
    staff: List[Staff] = report_key(key_type=KeyType.COMPLEX, default_factory=list)


# A complex key on a plain string.
@dataclass
class IncorrectAnnotation:
    text: Optional[str] = report_key()
    values: Optional[str] = report_key(key_type=KeyType.COMPLEX)


@dataclass
class Wrapper:
    inner: List[IncorrectAnnotation] = report_key(key_type=KeyType.COMPLEX, default_factory=list)


# Mutually recursive element types.
@dataclass
class Branch:
    label: Optional[str] = report_key("branch_label")
    leaves: List[Leaf] = report_key("leaves", key_type=KeyType.COMPLEX, default_factory=list)


@dataclass
class Leaf:
    label: Optional[str] = report_key("leaf_label")
    branches: List[Branch] = report_key("branches", key_type=KeyType.COMPLEX, default_factory=list)


@dataclass
class Tree:
    branches: List[Branch] = report_key("tree_branches", key_type=KeyType.COMPLEX, default_factory=list)


# Lists of lists for sheet reference graphs (list_a -> list_b -> list_d, list_a -> list_c).
@dataclass
class NodeD:
    value: Optional[str] = report_key("d_value")


@dataclass
class NodeB:
    ds: List[NodeD] = report_key("list_d", key_type=KeyType.COMPLEX, default_factory=list)


@dataclass
class NodeC:
    label: Optional[str] = report_key("c_label")


@dataclass
class NodeA:
    bs: List[NodeB] = report_key("list_b", key_type=KeyType.COMPLEX, default_factory=list)
    cs: List[NodeC] = report_key("list_c", key_type=KeyType.COMPLEX, default_factory=list)


@dataclass
class Graph:
    as_: List[NodeA] = report_key("list_a", key_type=KeyType.COMPLEX, default_factory=list)


# Declarations through Annotated metadata on pydantic models.
class Contact(BaseModel):
    email: Annotated[Optional[str], ReportKey("contact_email")] = None
    plain: Optional[str] = None


class Customer(BaseModel):
    name: Annotated[str, ReportKey("customer_name", description="Customer display name")]
    since: Annotated[Optional[int], ReportKey("customer_since", data_type=DataType.DATE)] = None
    contacts: Annotated[List[Contact], ReportKey("contacts", key_type=KeyType.COMPLEX)] = []


# A key name clashing with the reserved counter.
@dataclass
class CounterClash:
    value: Optional[str] = report_key("key_counter")
