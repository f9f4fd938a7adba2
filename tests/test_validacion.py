import pytest

from cuaderno.core.calificaciones import EvaluacionPeso
from cuaderno.core.exceptions import (
    CampoFaltante,
    CorteInvalido,
    ErrorValidacion,
    PorcentajeInvalido,
    TopeCorteExcedido,
    TopeTotalExcedido,
)
from cuaderno.core.validacion import TOPES_CORTE, validar_evaluacion


@pytest.fixture
def existentes():
    return [EvaluacionPeso(id="e1", corte=1, nombre="Quiz", porcentaje=20)]


class TestCampos:
    @pytest.mark.parametrize("nombre", ["", "   ", None])
    def test_missing_name(self, nombre):
        with pytest.raises(CampoFaltante):
            validar_evaluacion(nombre, 10, 1, [])

    @pytest.mark.parametrize("porcentaje", [None, "", "abc", float("nan"), float("inf")])
    def test_percentage_not_a_number(self, porcentaje):
        with pytest.raises(CampoFaltante):
            validar_evaluacion("Quiz", porcentaje, 1, [])

    @pytest.mark.parametrize("porcentaje", [0, -5, 100.5])
    def test_percentage_out_of_range(self, porcentaje):
        with pytest.raises(PorcentajeInvalido):
            validar_evaluacion("Quiz", porcentaje, 1, [])

    @pytest.mark.parametrize(
        "corte", [0, 4, "x", 1.5, None, float("inf"), float("-inf"), float("nan")]
    )
    def test_invalid_corte(self, corte):
        with pytest.raises(CorteInvalido):
            validar_evaluacion("Quiz", 10, corte, [])

    def test_normalizes_input(self):
        propuesta = validar_evaluacion("  Parcial  ", "12.5", "2", [])
        assert propuesta.nombre == "Parcial"
        assert propuesta.porcentaje == 12.5
        assert propuesta.corte == 2

    def test_all_errors_share_a_base(self):
        assert issubclass(TopeCorteExcedido, ErrorValidacion)
        assert issubclass(TopeTotalExcedido, ErrorValidacion)


class TestTopeCorte:
    def test_default_caps(self):
        assert TOPES_CORTE == {1: 30.0, 2: 30.0, 3: 40.0}

    def test_add_within_cap(self, existentes):
        propuesta = validar_evaluacion("Taller", 10, 1, existentes)
        assert propuesta.porcentaje == 10

    def test_add_over_cap_reports_remaining(self, existentes):
        with pytest.raises(TopeCorteExcedido) as exc:
            validar_evaluacion("Taller", 15, 1, existentes)
        assert exc.value.restante == pytest.approx(10)
        assert exc.value.corte == 1
        assert "Restante: 10.00%" in exc.value.mensaje

    def test_edit_keeping_same_percentage(self, existentes):
        propuesta = validar_evaluacion("Quiz", 20, 1, existentes, editando_id="e1")
        assert propuesta.porcentaje == 20

    def test_edit_excludes_own_percentage(self, existentes):
        propuesta = validar_evaluacion("Quiz", 25, 1, existentes, editando_id="e1")
        assert propuesta.porcentaje == 25

    def test_edit_over_cap(self, existentes):
        with pytest.raises(TopeCorteExcedido) as exc:
            validar_evaluacion("Quiz", 35, 1, existentes, editando_id="e1")
        assert exc.value.restante == pytest.approx(10)
        assert exc.value.maximo_permitido == pytest.approx(30)

    def test_moving_to_another_corte(self, existentes):
        propuesta = validar_evaluacion("Quiz", 20, 3, existentes, editando_id="e1")
        assert propuesta.corte == 3

    def test_other_cortes_do_not_count(self, existentes):
        propuesta = validar_evaluacion("Final", 40, 3, existentes)
        assert propuesta.corte == 3

    def test_fractional_sum_hits_cap_exactly(self):
        existentes = [
            EvaluacionPeso(id="a", corte=2, nombre="A", porcentaje=10.1),
            EvaluacionPeso(id="b", corte=2, nombre="B", porcentaje=9.7),
        ]
        propuesta = validar_evaluacion("C", 10.2, 2, existentes)
        assert propuesta.porcentaje == 10.2

    def test_rejection_leaves_existing_unchanged(self, existentes):
        copia = list(existentes)
        with pytest.raises(TopeCorteExcedido):
            validar_evaluacion("Otra", 20, 1, existentes)
        assert existentes == copia


class TestTopeTotal:
    def test_total_cap_with_custom_caps(self):
        topes = {1: 60, 2: 60, 3: 60}
        existentes = [
            EvaluacionPeso(id="a", corte=1, nombre="A", porcentaje=50),
            EvaluacionPeso(id="b", corte=2, nombre="B", porcentaje=40),
        ]
        with pytest.raises(TopeTotalExcedido) as exc:
            validar_evaluacion("C", 20, 3, existentes, topes=topes)
        assert exc.value.restante == pytest.approx(10)
        assert "Restante: 10.00%" in exc.value.mensaje

    def test_total_cap_edit_excludes_itself(self):
        topes = {1: 60, 2: 60, 3: 60}
        existentes = [
            EvaluacionPeso(id="a", corte=1, nombre="A", porcentaje=50),
            EvaluacionPeso(id="b", corte=2, nombre="B", porcentaje=50),
        ]
        propuesta = validar_evaluacion("B", 50, 2, existentes, editando_id="b", topes=topes)
        assert propuesta.porcentaje == 50

    def test_full_default_budget(self):
        existentes = [
            EvaluacionPeso(id="a", corte=1, nombre="A", porcentaje=30),
            EvaluacionPeso(id="b", corte=2, nombre="B", porcentaje=30),
            EvaluacionPeso(id="c", corte=3, nombre="C", porcentaje=40),
        ]
        with pytest.raises(TopeCorteExcedido) as exc:
            validar_evaluacion("D", 1, 3, existentes)
        assert exc.value.restante == 0
