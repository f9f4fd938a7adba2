from pydantic import BaseModel
from typing import Dict, List, Optional

from cuaderno.core import calificaciones
from cuaderno.core.calificaciones import valor_de
from cuaderno.core import reportes


class PuntajeSalida(BaseModel):
    valor: Optional[float] = None
    calificado: bool

    @classmethod
    def desde(cls, puntaje: calificaciones.Puntaje) -> "PuntajeSalida":
        valor = valor_de(puntaje)
        return cls(valor=valor, calificado=valor is not None)


class EntradaEstadistica(BaseModel):
    nombre: str
    nota: float


class Estadisticas(BaseModel):
    promedio: float
    nota_mas_alta: float
    nota_mas_baja: float
    aprobados: int
    reprobados: int
    tasa_aprobacion: float
    distribucion: List[int]
    estudiantes_aprobados: List[EntradaEstadistica]
    estudiantes_reprobados: List[EntradaEstadistica]

    @classmethod
    def desde(cls, stats: calificaciones.Estadisticas) -> "Estadisticas":
        return cls(
            promedio=stats.promedio,
            nota_mas_alta=stats.nota_mas_alta,
            nota_mas_baja=stats.nota_mas_baja,
            aprobados=stats.aprobados,
            reprobados=stats.reprobados,
            tasa_aprobacion=stats.tasa_aprobacion,
            distribucion=list(stats.distribucion),
            estudiantes_aprobados=[
                EntradaEstadistica(nombre=n, nota=v) for n, v in stats.estudiantes_aprobados
            ],
            estudiantes_reprobados=[
                EntradaEstadistica(nombre=n, nota=v) for n, v in stats.estudiantes_reprobados
            ],
        )


class EvaluacionColumna(BaseModel):
    id: str
    nombre: str
    porcentaje: float


class CeldaSalida(BaseModel):
    evaluacion_id: str
    puntaje: PuntajeSalida


class CorteSalida(BaseModel):
    corte: int
    celdas: List[CeldaSalida]
    total: float


class FilaSalida(BaseModel):
    estudiante_id: str
    nombre: str
    correo: str
    cortes: List[CorteSalida]
    nota_final: float


class TablaSalida(BaseModel):
    materia_id: str
    columnas: Dict[int, List[EvaluacionColumna]]
    filas: List[FilaSalida]

    @classmethod
    def desde(cls, materia_id: str, tabla: reportes.TablaCalificaciones) -> "TablaSalida":
        return cls(
            materia_id=materia_id,
            columnas={
                corte: [
                    EvaluacionColumna(id=ev.id, nombre=ev.nombre, porcentaje=ev.porcentaje)
                    for ev in evs
                ]
                for corte, evs in tabla.columnas.items()
            },
            filas=[
                FilaSalida(
                    estudiante_id=f.estudiante.id,
                    nombre=f.estudiante.nombre,
                    correo=f.estudiante.correo,
                    cortes=[
                        CorteSalida(
                            corte=c.corte,
                            celdas=[
                                CeldaSalida(
                                    evaluacion_id=celda.evaluacion_id,
                                    puntaje=PuntajeSalida.desde(celda.puntaje),
                                )
                                for celda in c.celdas
                            ],
                            total=c.total,
                        )
                        for c in f.cortes
                    ],
                    nota_final=f.nota_final,
                )
                for f in tabla.filas
            ],
        )


class EstadisticasEvaluacion(BaseModel):
    evaluacion_id: str
    nombre: str
    corte: int
    porcentaje: float
    sin_calificar: int
    estadisticas: Estadisticas


class ReporteSalida(BaseModel):
    materia_id: str
    nota_aprobatoria: float
    general: Estadisticas
    corte1: Estadisticas
    corte2: Estadisticas
    corte3: Estadisticas
    evaluaciones: List[EstadisticasEvaluacion]

    @classmethod
    def desde(
        cls, materia_id: str, nota_aprobatoria: float, reporte: reportes.Reporte
    ) -> "ReporteSalida":
        return cls(
            materia_id=materia_id,
            nota_aprobatoria=nota_aprobatoria,
            general=Estadisticas.desde(reporte.general),
            corte1=Estadisticas.desde(reporte.cortes[1]),
            corte2=Estadisticas.desde(reporte.cortes[2]),
            corte3=Estadisticas.desde(reporte.cortes[3]),
            evaluaciones=[
                EstadisticasEvaluacion(
                    evaluacion_id=e.evaluacion.id,
                    nombre=e.evaluacion.nombre,
                    corte=e.evaluacion.corte,
                    porcentaje=e.evaluacion.porcentaje,
                    sin_calificar=e.sin_calificar,
                    estadisticas=Estadisticas.desde(e.estadisticas),
                )
                for e in reporte.evaluaciones
            ],
        )


class CorreoSalida(BaseModel):
    asunto: str
    cuerpo: str
    destinatarios: List[str]
    mailto: str

    @classmethod
    def desde(cls, borrador: reportes.BorradorCorreo) -> "CorreoSalida":
        return cls(
            asunto=borrador.asunto,
            cuerpo=borrador.cuerpo,
            destinatarios=borrador.destinatarios,
            mailto=borrador.mailto,
        )
