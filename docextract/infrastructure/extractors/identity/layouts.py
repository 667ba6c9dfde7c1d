"""
Ordem das estratégias por campo, por subtipo de documento.

A ordem é o contrato: para cada campo a primeira estratégia que
devolve valor vence. Campos de filiação são extraídos depois do
nome, com a linha do titular removida.
"""

from docextract.core.entities.document import IdentitySubtype
from docextract.core.interfaces.field_strategy import IFieldStrategy
from docextract.infrastructure.extractors.identity.strategies import (
    BirthplaceStrategy,
    DocumentOriginStrategy,
    IssuingAuthorityStrategy,
    NameAfterFiliationStrategy,
    NameAfterLabelStrategy,
    NameAfterRegistryNumberStrategy,
    NameBeforeFiliationStrategy,
    ParentStrategy,
    StructuralNameStrategy,
    birth_date_strategies,
    category_strategies,
    cpf_strategies,
    expiry_date_strategies,
    first_license_date_strategies,
    issue_date_strategies,
    license_number_strategies,
    registry_number_strategies,
)

Layout = dict[str, tuple[IFieldStrategy, ...]]

DRIVER_LICENSE = "CNH"

PARENT_FIELDS = ("mother_name", "father_name")


def _parents() -> Layout:
    return {
        "mother_name": (ParentStrategy(0),),
        "father_name": (ParentStrategy(1),),
    }


def rg_layout() -> Layout:
    """RG antigo e genérico: as duas posições do nome em torno de FILIAÇÃO."""
    return {
        "holder_name": (
            NameAfterLabelStrategy(),
            NameBeforeFiliationStrategy(),
            NameAfterFiliationStrategy(),
            NameAfterRegistryNumberStrategy(),
            StructuralNameStrategy(),
        ),
        "registry_number": registry_number_strategies(),
        "cpf": cpf_strategies(),
        "birth_date": birth_date_strategies(),
        **_parents(),
        "birthplace": (BirthplaceStrategy(),),
        "issue_date": issue_date_strategies(),
        "issuing_authority": (IssuingAuthorityStrategy(),),
        "document_origin": (DocumentOriginStrategy(),),
    }


def cin_layout() -> Layout:
    """CIN: nome sempre rotulado; FILIAÇÃO lista só os pais."""
    layout = rg_layout()
    layout["holder_name"] = (
        NameAfterLabelStrategy(),
        NameBeforeFiliationStrategy(),
        StructuralNameStrategy(),
    )
    return layout


def driver_license_layout() -> Layout:
    return {
        "holder_name": (NameAfterLabelStrategy(), StructuralNameStrategy()),
        "license_number": license_number_strategies(),
        "cpf": cpf_strategies(),
        "birth_date": birth_date_strategies(),
        "category": category_strategies(),
        "expiry_date": expiry_date_strategies(),
        "first_license_date": first_license_date_strategies(),
        **_parents(),
    }


def default_layouts() -> dict[str, Layout]:
    return {
        IdentitySubtype.RG_ANTIGO.value: rg_layout(),
        IdentitySubtype.RG_GENERICO.value: rg_layout(),
        IdentitySubtype.CIN.value: cin_layout(),
        DRIVER_LICENSE: driver_license_layout(),
    }
