"""
IMPORTAÇÃO DE PLANILHA (.xlsx)
==============================

Lê a primeira aba da planilha de ofertas de fornecedores e cria uma
oportunidade por linha válida.

Formato esperado:
- Linhas 1-3: título/banner (ignoradas)
- Linha 4: cabeçalho
- Linha 5 em diante: dados

Os nomes das colunas variam entre versões da planilha ("Product " com
espaço, "product" minúsculo...). A resolução usa COLUMN_ALIASES: para cada
campo, o primeiro nome presente e não vazio vence. Nova variante = nova
entrada na tabela.
"""

import io
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Tuple
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from deal_tracker.domain.entities import DealType
from deal_tracker.domain.errors import ValidationError
from deal_tracker.domain.services.field_normalizer import clean_text
from deal_tracker.application.services.opportunity_service import OpportunityService

logger = logging.getLogger(__name__)

# Cabeçalho na linha 4 (1-based); as três primeiras são banner
HEADER_ROW = 4


# ============================================
# ALIASES DE COLUNAS (ordem = prioridade)
# ============================================

COLUMN_ALIASES: Dict[str, Tuple[str, ...]] = {
    "supplier": ("Supplier", "Supplier ", "supplier"),
    "product": ("Product ", "Product", "product"),
    "customer": ("Customer", "Customer ", "customer"),
    "supplier_price": ("Price (Currency)", "Price", "Price ", "price"),
    "target_sell_price": ("Target Sell Price", "Target Sell Price ", "TargetSellPrice"),
    "incoterms": ("Incoterms", "Incoterms ", "incoterms"),
    "country_of_origin": ("Country of Origin (COO)", "Country of Origin", "country_of_origin"),
    "intermediary": ("Intermediary", "Intermediary ", "intermediary"),
    "deal_contacts": ("Who is involved in the deal", "Who is involved in the deal?"),
    "notes": ("Notes", "Notes ", "notes"),
    "euc_text": ("EUC", "EUC ", "euc"),
    "stage": ("Stage", "stage"),
    "status": ("Status", "status"),
}


@dataclass
class ImportResult:
    """Resumo da importação."""
    imported_count: int
    rows_read: int
    sheet_name: str

    def to_dict(self) -> Dict[str, Any]:
        return {"imported": self.imported_count, "rows_read": self.rows_read, "sheet": self.sheet_name}


def resolve_column(row: Mapping[str, Any], aliases: Sequence[str]) -> Any:
    """Primeiro alias presente e não vazio; "" se nenhum."""
    for key in aliases:
        value = row.get(key)
        if value is not None and clean_text(value) != "":
            return value
    return ""


def map_row(row: Mapping[str, Any]) -> Dict[str, Any]:
    """Linha da planilha -> payload cru para o sanitizer."""
    return {field: resolve_column(row, aliases) for field, aliases in COLUMN_ALIASES.items()}


def _is_blank(values: Iterable[Any]) -> bool:
    return all(value is None or clean_text(value) == "" for value in values)


def read_rows(data: bytes) -> Tuple[str, List[Dict[str, Any]]]:
    """
    Lê a primeira aba e devolve (nome_da_aba, linhas).

    Cada linha é um dict {cabeçalho: valor}; células vazias viram "".
    Linhas totalmente vazias são descartadas.
    """
    try:
        workbook = load_workbook(io.BytesIO(data), data_only=True)
    except (InvalidFileException, BadZipFile, KeyError, ValueError, OSError) as e:
        raise ValidationError("Arquivo .xlsx inválido") from e

    try:
        sheet = workbook.worksheets[0]
        rows_iter = sheet.iter_rows(min_row=HEADER_ROW, values_only=True)

        header_cells = next(rows_iter, None)
        if header_cells is None:
            return sheet.title, []

        headers: List[Tuple[int, str]] = []
        seen = set()
        for index, cell in enumerate(header_cells):
            if cell is None or str(cell) == "":
                continue
            name = str(cell)
            if name in seen:
                continue
            seen.add(name)
            headers.append((index, name))

        rows: List[Dict[str, Any]] = []
        for values in rows_iter:
            if _is_blank(values):
                continue
            rows.append({
                name: (values[index] if index < len(values) and values[index] is not None else "")
                for index, name in headers
            })
        return sheet.title, rows
    finally:
        workbook.close()


class SpreadsheetImporter:
    """Importa ofertas de fornecedores a partir de .xlsx."""

    def __init__(self, service: OpportunityService):
        self.service = service

    async def import_workbook(self, data: bytes, acting_user: str) -> ImportResult:
        """
        Cria uma oportunidade por linha com supplier e product.

        Linhas sem supplier/product entram em rows_read mas não em
        imported_count. Cada linha é gravada sozinha: erro de banco no meio
        interrompe o lote sem desfazer o que já foi gravado.
        """
        sheet_name, rows = read_rows(data)

        imported = 0
        for row in rows:
            payload = map_row(row)
            payload["deal_type"] = DealType.SUPPLIER_OFFER.value
            payload["owner"] = acting_user

            try:
                await self.service.create(payload, acting_user)
            except ValidationError:
                logger.debug(f"Linha ignorada na importação (sem supplier/product): {payload['supplier']!r}")
                continue
            imported += 1

        logger.info(f"Importação '{sheet_name}': {imported} de {len(rows)} linhas por {acting_user}")
        return ImportResult(imported_count=imported, rows_read=len(rows), sheet_name=sheet_name)
