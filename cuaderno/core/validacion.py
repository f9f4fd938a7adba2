"""Reglas de porcentaje para crear o editar evaluaciones.

Política: cada corte tiene un tope propio (30/30/40 por defecto) y además la
suma de toda la materia no puede pasar de 100. La misma función sirve para
agregar y para editar; al editar se excluye la evaluación que se modifica.
"""
import math
from typing import Any, Iterable, Mapping, NamedTuple, Optional

from .calificaciones import CORTES, EvaluacionPeso
from .exceptions import (
    CampoFaltante,
    CorteInvalido,
    PorcentajeInvalido,
    TopeCorteExcedido,
    TopeTotalExcedido,
)

TOPES_CORTE = {1: 30.0, 2: 30.0, 3: 40.0}
TOPE_TOTAL = 100.0

# Tolerancia para sumas de porcentajes no enteros (10.1 + 19.9, etc.)
EPSILON = 1e-9


class EvaluacionPropuesta(NamedTuple):
    nombre: str
    porcentaje: float
    corte: int


def _a_numero(valor: Any) -> Optional[float]:
    if isinstance(valor, bool) or valor is None:
        return None
    try:
        numero = float(valor)
    except (TypeError, ValueError):
        return None
    return numero if math.isfinite(numero) else None


def _a_corte(valor: Any) -> Optional[int]:
    if isinstance(valor, bool):
        return None
    try:
        corte = int(valor)
    except (TypeError, ValueError, OverflowError):
        return None
    return corte if corte in CORTES and corte == float(valor) else None


def validar_evaluacion(
    nombre: Any,
    porcentaje: Any,
    corte: Any,
    existentes: Iterable[EvaluacionPeso],
    editando_id: Optional[str] = None,
    topes: Optional[Mapping[int, float]] = None,
) -> EvaluacionPropuesta:
    """Comprobar si la evaluación propuesta puede guardarse.

    Devuelve la propuesta normalizada o lanza una subclase de
    ``ErrorValidacion``. No modifica ``existentes``.
    """
    topes = TOPES_CORTE if topes is None else topes

    nombre = nombre.strip() if isinstance(nombre, str) else ""
    numero = _a_numero(porcentaje)
    if not nombre or numero is None:
        raise CampoFaltante("Nombre y porcentaje son requeridos.")

    if numero <= 0 or numero > TOPE_TOTAL:
        raise PorcentajeInvalido(
            "El porcentaje debe ser mayor que 0 y no exceder 100."
        )

    corte_num = _a_corte(corte)
    if corte_num is None:
        raise CorteInvalido("El corte debe ser 1, 2 o 3.")

    existentes = list(existentes)
    otras = [ev for ev in existentes if ev.id != editando_id]

    tope_corte = float(topes[corte_num])
    asignado_corte = sum(ev.porcentaje for ev in existentes if ev.corte == corte_num)
    otras_corte = sum(ev.porcentaje for ev in otras if ev.corte == corte_num)
    if otras_corte + numero > tope_corte + EPSILON:
        restante = max(tope_corte - asignado_corte, 0.0)
        raise TopeCorteExcedido(
            f"El porcentaje del Corte {corte_num} no puede exceder {tope_corte:g}%. "
            f"Restante: {restante:.2f}%",
            corte=corte_num,
            restante=restante,
            maximo_permitido=max(tope_corte - otras_corte, 0.0),
        )

    asignado_total = sum(ev.porcentaje for ev in existentes)
    otras_total = sum(ev.porcentaje for ev in otras)
    if otras_total + numero > TOPE_TOTAL + EPSILON:
        restante = max(TOPE_TOTAL - asignado_total, 0.0)
        raise TopeTotalExcedido(
            f"El porcentaje total no puede exceder 100%. Restante: {restante:.2f}%",
            restante=restante,
            maximo_permitido=max(TOPE_TOTAL - otras_total, 0.0),
        )

    return EvaluacionPropuesta(nombre=nombre, porcentaje=numero, corte=corte_num)
