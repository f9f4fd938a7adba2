"""Excepciones del cuaderno de notas"""
from typing import Optional


class ErrorCuaderno(Exception):
    """Excepción base del cuaderno"""

    codigo = "error"

    def __init__(self, mensaje: str):
        super().__init__(mensaje)
        self.mensaje = mensaje


class ErrorValidacion(ErrorCuaderno):
    """Una evaluación propuesta no puede guardarse"""

    codigo = "validacion"
    restante: Optional[float] = None


class CampoFaltante(ErrorValidacion):
    codigo = "campo_faltante"


class PorcentajeInvalido(ErrorValidacion):
    codigo = "porcentaje_invalido"


class CorteInvalido(ErrorValidacion):
    codigo = "corte_invalido"


class TopeExcedido(ErrorValidacion):
    """Se supera el porcentaje disponible.

    ``restante`` es lo que queda sin asignar tal como está la materia ahora;
    ``maximo_permitido`` es el mayor porcentaje que aceptaría la propuesta.
    """

    def __init__(self, mensaje: str, restante: float, maximo_permitido: float):
        super().__init__(mensaje)
        self.restante = restante
        self.maximo_permitido = maximo_permitido


class TopeCorteExcedido(TopeExcedido):
    codigo = "tope_corte_excedido"

    def __init__(self, mensaje: str, corte: int, restante: float, maximo_permitido: float):
        super().__init__(mensaje, restante, maximo_permitido)
        self.corte = corte


class TopeTotalExcedido(TopeExcedido):
    codigo = "tope_total_excedido"


class NoEncontrado(ErrorCuaderno):
    codigo = "no_encontrado"


class YaInscrito(ErrorCuaderno):
    codigo = "ya_inscrito"


class CorteSinEvaluaciones(ErrorCuaderno):
    codigo = "corte_sin_evaluaciones"


class ErrorImportacion(ErrorCuaderno):
    codigo = "error_importacion"
