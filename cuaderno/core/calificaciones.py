"""Motor de agregación de calificaciones.

Funciones puras sobre instantáneas de estudiantes, evaluaciones y notas.
No hacen I/O ni guardan estado: cada vista (tabla, reporte, CSV, correo)
las vuelve a invocar con la instantánea más reciente.
"""
import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

CORTES = (1, 2, 3)
NOTA_APROBATORIA = 10.0
NOTA_MINIMA = 0.0
NOTA_MAXIMA = 20.0

# Límites superiores (exclusivos) de los rangos 0-3.9, 4-7.9, 8-11.9, 12-15.9; el último es 16-20
LIMITES_DISTRIBUCION = (4.0, 8.0, 12.0, 16.0)


@dataclass(frozen=True)
class Calificado:
    valor: float


class NoCalificado:
    """Nota todavía sin registrar (distinta de un 0 explícito)"""

    _instancia = None

    def __new__(cls):
        if cls._instancia is None:
            cls._instancia = super().__new__(cls)
        return cls._instancia

    def __repr__(self):
        return "NO_CALIFICADO"

    def __bool__(self):
        return False


NO_CALIFICADO = NoCalificado()

Puntaje = Union[Calificado, NoCalificado]


def puntaje_desde_valor(valor: Optional[float]) -> Puntaje:
    return NO_CALIFICADO if valor is None else Calificado(float(valor))


def valor_de(puntaje: Puntaje) -> Optional[float]:
    return puntaje.valor if isinstance(puntaje, Calificado) else None


def valor_o_cero(puntaje: Puntaje) -> float:
    return puntaje.valor if isinstance(puntaje, Calificado) else 0.0


def limitar_nota(valor: float) -> float:
    if not math.isfinite(valor):
        raise ValueError(f"Nota inválida: {valor}")
    return max(NOTA_MINIMA, min(NOTA_MAXIMA, valor))


@dataclass(frozen=True)
class EvaluacionPeso:
    id: str
    corte: int
    nombre: str
    porcentaje: float


@dataclass(frozen=True)
class NotaRegistro:
    estudiante_id: str
    evaluacion_id: str
    puntaje: Puntaje = NO_CALIFICADO


@dataclass(frozen=True)
class EstudianteDatos:
    id: str
    nombre: str
    correo: str = ""


@dataclass(frozen=True)
class InstantaneaMateria:
    materia_id: str
    nombre: str
    periodo: str
    estudiantes: Tuple[EstudianteDatos, ...] = ()
    evaluaciones: Tuple[EvaluacionPeso, ...] = ()
    notas: Tuple[NotaRegistro, ...] = ()

    def indice_notas(self) -> Dict[Tuple[str, str], Puntaje]:
        return indexar_notas(self.notas)

    def estudiantes_ordenados(self) -> List[EstudianteDatos]:
        return sorted(self.estudiantes, key=lambda e: e.nombre.casefold())


@dataclass
class Estadisticas:
    promedio: float = 0.0
    nota_mas_alta: float = 0.0
    nota_mas_baja: float = 0.0
    aprobados: int = 0
    reprobados: int = 0
    tasa_aprobacion: float = 0.0
    distribucion: List[int] = field(default_factory=lambda: [0, 0, 0, 0, 0])
    estudiantes_aprobados: List[Tuple[str, float]] = field(default_factory=list)
    estudiantes_reprobados: List[Tuple[str, float]] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.aprobados + self.reprobados


NotasEntrada = Union[Iterable[NotaRegistro], Mapping[Tuple[str, str], Puntaje]]


def indexar_notas(notas: NotasEntrada) -> Dict[Tuple[str, str], Puntaje]:
    if isinstance(notas, Mapping):
        return dict(notas)
    return {(n.estudiante_id, n.evaluacion_id): n.puntaje for n in notas}


def _indice(notas: NotasEntrada) -> Mapping[Tuple[str, str], Puntaje]:
    return notas if isinstance(notas, Mapping) else indexar_notas(notas)


def evaluaciones_de_corte(
    corte: int, evaluaciones: Iterable[EvaluacionPeso]
) -> List[EvaluacionPeso]:
    return sorted(
        (ev for ev in evaluaciones if ev.corte == corte),
        key=lambda ev: ev.nombre.casefold(),
    )


def evaluaciones_por_corte(
    evaluaciones: Iterable[EvaluacionPeso],
) -> Dict[int, List[EvaluacionPeso]]:
    evaluaciones = list(evaluaciones)
    return {corte: evaluaciones_de_corte(corte, evaluaciones) for corte in CORTES}


def porcentaje_corte(corte: int, evaluaciones: Iterable[EvaluacionPeso]) -> float:
    return sum(ev.porcentaje for ev in evaluaciones if ev.corte == corte)


def suma_ponderada_corte(
    estudiante_id: str,
    corte: int,
    evaluaciones: Iterable[EvaluacionPeso],
    notas: NotasEntrada,
) -> float:
    """Aporte del corte a la nota final: suma de nota × (porcentaje / 100)"""
    indice = _indice(notas)
    total = 0.0
    for ev in evaluaciones:
        if ev.corte != corte:
            continue
        puntaje = indice.get((estudiante_id, ev.id), NO_CALIFICADO)
        total += valor_o_cero(puntaje) * (ev.porcentaje / 100)
    return total


def nota_corte_normalizada(
    estudiante_id: str,
    corte: int,
    evaluaciones: Iterable[EvaluacionPeso],
    notas: NotasEntrada,
) -> float:
    """Nota del corte llevada a la escala 0-20.

    Divide la suma ponderada entre la fracción que representan las
    evaluaciones del corte, así un corte incompleto se muestra en 0-20.
    """
    evaluaciones = list(evaluaciones)
    total_porcentaje = porcentaje_corte(corte, evaluaciones)
    if total_porcentaje <= 0:
        return 0.0
    suma = suma_ponderada_corte(estudiante_id, corte, evaluaciones, notas)
    return suma / (total_porcentaje / 100)


def nota_final(
    estudiante_id: str, evaluaciones: Iterable[EvaluacionPeso], notas: NotasEntrada
) -> float:
    evaluaciones = list(evaluaciones)
    indice = _indice(notas)
    return sum(
        suma_ponderada_corte(estudiante_id, corte, evaluaciones, indice)
        for corte in CORTES
    )


def _redondear(valor: float) -> float:
    return round(valor, 2)


def indice_distribucion(nota: float) -> int:
    for i, limite in enumerate(LIMITES_DISTRIBUCION):
        if nota < limite:
            return i
    return len(LIMITES_DISTRIBUCION)


def calcular_estadisticas(
    puntajes: Sequence[Tuple[str, float]], nota_aprobatoria: float = NOTA_APROBATORIA
) -> Estadisticas:
    """Estadísticas descriptivas de una lista de (nombre, nota)"""
    if not puntajes:
        return Estadisticas()

    notas = [nota for _, nota in puntajes]
    total = len(notas)
    aprobados = sum(1 for nota in notas if nota >= nota_aprobatoria)

    distribucion = [0, 0, 0, 0, 0]
    for nota in notas:
        distribucion[indice_distribucion(nota)] += 1

    # sorted es estable: empates conservan el orden de entrada
    por_nota = sorted(puntajes, key=lambda p: p[1], reverse=True)

    return Estadisticas(
        promedio=_redondear(sum(notas) / total),
        nota_mas_alta=_redondear(max(notas)),
        nota_mas_baja=_redondear(min(notas)),
        aprobados=aprobados,
        reprobados=total - aprobados,
        tasa_aprobacion=_redondear(aprobados / total * 100),
        distribucion=distribucion,
        estudiantes_aprobados=[p for p in por_nota if p[1] >= nota_aprobatoria],
        estudiantes_reprobados=[p for p in por_nota if p[1] < nota_aprobatoria],
    )


def resumen_porcentajes(
    evaluaciones: Iterable[EvaluacionPeso], topes: Optional[Mapping[int, float]] = None
) -> dict:
    """Porcentajes asignados por corte (solo cortes con evaluaciones) y en total"""
    evaluaciones = list(evaluaciones)
    por_corte = {}
    for corte in CORTES:
        if not any(ev.corte == corte for ev in evaluaciones):
            continue
        asignado = porcentaje_corte(corte, evaluaciones)
        item = {"corte": corte, "asignado": _redondear(asignado)}
        if topes is not None and corte in topes:
            item["tope"] = topes[corte]
            item["restante"] = _redondear(topes[corte] - asignado)
        por_corte[corte] = item

    total = sum(ev.porcentaje for ev in evaluaciones)
    return {
        "cortes": list(por_corte.values()),
        "total": _redondear(total),
        "restante": _redondear(100 - total),
    }
