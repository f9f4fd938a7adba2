"""Vistas derivadas de una instantánea de materia.

Tabla de calificaciones, reporte estadístico, exportación CSV y borradores de
correo. Todas usan las mismas funciones de ``calificaciones`` para que los
números coincidan entre vistas.
"""
import csv
import io
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional
from urllib.parse import quote

from .calificaciones import (
    CORTES,
    NO_CALIFICADO,
    NOTA_APROBATORIA,
    Calificado,
    EstudianteDatos,
    Estadisticas,
    EvaluacionPeso,
    InstantaneaMateria,
    Puntaje,
    calcular_estadisticas,
    evaluaciones_por_corte,
    nota_corte_normalizada,
    nota_final,
    suma_ponderada_corte,
)
from .exceptions import CorteSinEvaluaciones, ErrorImportacion, NoEncontrado

SIN_NOTA = "N/P"


def formatear_puntaje(puntaje: Puntaje, decimales: Optional[int] = None) -> str:
    if not isinstance(puntaje, Calificado):
        return SIN_NOTA
    if decimales is None:
        return f"{puntaje.valor:g}"
    return f"{puntaje.valor:.{decimales}f}"


def _nombre_archivo(texto: str) -> str:
    return re.sub(r"\s+", "_", texto.strip())


# ---------------------------------------------------------------------------
# Tabla de calificaciones


@dataclass
class CeldaNota:
    evaluacion_id: str
    puntaje: Puntaje


@dataclass
class CorteFila:
    corte: int
    celdas: List[CeldaNota]
    total: float


@dataclass
class FilaTabla:
    estudiante: EstudianteDatos
    cortes: List[CorteFila]
    nota_final: float


@dataclass
class TablaCalificaciones:
    columnas: Dict[int, List[EvaluacionPeso]]
    filas: List[FilaTabla] = field(default_factory=list)


def construir_tabla(instantanea: InstantaneaMateria) -> TablaCalificaciones:
    por_corte = evaluaciones_por_corte(instantanea.evaluaciones)
    columnas = {corte: evs for corte, evs in por_corte.items() if evs}
    indice = instantanea.indice_notas()

    filas = []
    for estudiante in instantanea.estudiantes_ordenados():
        cortes = []
        for corte, evs in columnas.items():
            celdas = [
                CeldaNota(ev.id, indice.get((estudiante.id, ev.id), NO_CALIFICADO))
                for ev in evs
            ]
            total = suma_ponderada_corte(estudiante.id, corte, evs, indice)
            cortes.append(CorteFila(corte=corte, celdas=celdas, total=total))
        filas.append(
            FilaTabla(
                estudiante=estudiante,
                cortes=cortes,
                nota_final=nota_final(estudiante.id, instantanea.evaluaciones, indice),
            )
        )
    return TablaCalificaciones(columnas=columnas, filas=filas)


# ---------------------------------------------------------------------------
# Reporte estadístico


@dataclass
class EstadisticasEvaluacion:
    evaluacion: EvaluacionPeso
    estadisticas: Estadisticas
    sin_calificar: int


@dataclass
class Reporte:
    general: Estadisticas
    cortes: Dict[int, Estadisticas]
    evaluaciones: List[EstadisticasEvaluacion]


def construir_reporte(
    instantanea: InstantaneaMateria, nota_aprobatoria: float = NOTA_APROBATORIA
) -> Reporte:
    indice = instantanea.indice_notas()
    estudiantes = instantanea.estudiantes_ordenados()
    evaluaciones = list(instantanea.evaluaciones)
    por_corte = evaluaciones_por_corte(evaluaciones)

    finales = [
        (e.nombre, nota_final(e.id, evaluaciones, indice)) for e in estudiantes
    ]

    cortes = {}
    for corte in CORTES:
        puntajes = []
        if por_corte[corte]:
            puntajes = [
                (e.nombre, nota_corte_normalizada(e.id, corte, evaluaciones, indice))
                for e in estudiantes
            ]
        cortes[corte] = calcular_estadisticas(puntajes, nota_aprobatoria)

    por_evaluacion = []
    for corte in CORTES:
        for ev in por_corte[corte]:
            calificados = []
            for e in estudiantes:
                puntaje = indice.get((e.id, ev.id))
                if isinstance(puntaje, Calificado):
                    calificados.append((e.nombre, puntaje.valor))
            por_evaluacion.append(
                EstadisticasEvaluacion(
                    evaluacion=ev,
                    estadisticas=calcular_estadisticas(calificados, nota_aprobatoria),
                    sin_calificar=len(estudiantes) - len(calificados),
                )
            )

    return Reporte(
        general=calcular_estadisticas(finales, nota_aprobatoria),
        cortes=cortes,
        evaluaciones=por_evaluacion,
    )


# ---------------------------------------------------------------------------
# Exportación CSV


def nombre_archivo_csv(instantanea: InstantaneaMateria) -> str:
    return f"calificaciones_detalladas_{_nombre_archivo(instantanea.nombre)}.csv"


def exportar_csv(instantanea: InstantaneaMateria) -> str:
    """CSV con cada evaluación, los totales por corte y la nota final"""
    tabla = construir_tabla(instantanea)

    encabezado = ["Cedula", "Nombre", "Correo"]
    for corte, evs in tabla.columnas.items():
        encabezado.extend(f"{ev.nombre} ({ev.porcentaje:g}%)" for ev in evs)
        encabezado.append(f"Total Corte {corte}")
    encabezado.append("Nota Final")

    salida = io.StringIO()
    writer = csv.writer(salida, lineterminator="\n")
    writer.writerow(encabezado)
    for fila in tabla.filas:
        registro = [fila.estudiante.id, fila.estudiante.nombre, fila.estudiante.correo]
        for corte_fila in fila.cortes:
            registro.extend(formatear_puntaje(c.puntaje, 2) for c in corte_fila.celdas)
            registro.append(f"{corte_fila.total:.2f}")
        registro.append(f"{fila.nota_final:.2f}")
        writer.writerow(registro)
    return salida.getvalue()


# ---------------------------------------------------------------------------
# Correos


@dataclass
class BorradorCorreo:
    asunto: str
    cuerpo: str
    destinatarios: List[str]

    @property
    def mailto(self) -> str:
        bcc = ",".join(self.destinatarios)
        return f"mailto:?bcc={bcc}&subject={quote(self.asunto)}&body={quote(self.cuerpo)}"


def _destinatarios(estudiantes: List[EstudianteDatos]) -> List[str]:
    return [e.correo for e in estudiantes if e.correo]


def correo_por_evaluacion(
    instantanea: InstantaneaMateria, evaluacion_id: str
) -> BorradorCorreo:
    evaluacion = next(
        (ev for ev in instantanea.evaluaciones if ev.id == evaluacion_id), None
    )
    if evaluacion is None:
        raise NoEncontrado("Evaluación no encontrada")

    indice = instantanea.indice_notas()
    estudiantes = instantanea.estudiantes_ordenados()
    lineas = [
        "Hola,",
        "",
        "A continuación se presentan las calificaciones para la evaluación "
        f'"{evaluacion.nombre}" ({evaluacion.porcentaje:g}%):',
        "",
    ]
    for e in estudiantes:
        puntaje = indice.get((e.id, evaluacion.id), NO_CALIFICADO)
        lineas.append(f"{e.nombre}: {formatear_puntaje(puntaje)}")
    lineas.extend(["", "Saludos."])

    return BorradorCorreo(
        asunto=f"Calificaciones: {evaluacion.nombre} - {instantanea.nombre}",
        cuerpo="\n".join(lineas),
        destinatarios=_destinatarios(estudiantes),
    )


def correo_por_corte(instantanea: InstantaneaMateria, corte: int) -> BorradorCorreo:
    evs = evaluaciones_por_corte(instantanea.evaluaciones).get(corte) or []
    if not evs:
        raise CorteSinEvaluaciones("No hay evaluaciones en este corte para enviar.")

    indice = instantanea.indice_notas()
    estudiantes = instantanea.estudiantes_ordenados()
    lineas = [
        "Hola,",
        "",
        f"A continuación se presentan las calificaciones finales para el Corte {corte}:",
        "",
    ]
    for e in estudiantes:
        total = suma_ponderada_corte(e.id, corte, evs, indice)
        lineas.append(f"{e.nombre}: {total:.2f}")
    lineas.extend(["", "Saludos."])

    return BorradorCorreo(
        asunto=f"Calificaciones Finales del Corte {corte} - {instantanea.nombre}",
        cuerpo="\n".join(lineas),
        destinatarios=_destinatarios(estudiantes),
    )


# ---------------------------------------------------------------------------
# Importación de estudiantes


def parsear_csv_estudiantes(texto: str) -> List[EstudianteDatos]:
    """Leer un CSV ``cedula,nombre,correo`` con cabecera"""
    lineas = [linea for linea in texto.splitlines() if linea.strip()]
    if len(lineas) <= 1:
        raise ErrorImportacion(
            "El archivo CSV está vacío o solo contiene la cabecera."
        )

    estudiantes = []
    for numero, campos in enumerate(csv.reader(lineas[1:]), start=2):
        campos = [c.strip() for c in campos]
        cedula, nombre, correo = (campos + ["", "", ""])[:3]
        if not cedula or not nombre or not correo:
            raise ErrorImportacion(
                f"Error en la línea {numero}: Faltan datos. "
                "El formato debe ser cedula,nombre,correo."
            )
        estudiantes.append(EstudianteDatos(id=cedula, nombre=nombre, correo=correo))
    return estudiantes
