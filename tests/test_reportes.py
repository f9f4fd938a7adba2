import csv
import io

import pytest

from cuaderno.core.calificaciones import Calificado, InstantaneaMateria, NO_CALIFICADO
from cuaderno.core.exceptions import CorteSinEvaluaciones, ErrorImportacion, NoEncontrado
from cuaderno.core.reportes import (
    construir_reporte,
    construir_tabla,
    correo_por_corte,
    correo_por_evaluacion,
    exportar_csv,
    formatear_puntaje,
    nombre_archivo_csv,
    parsear_csv_estudiantes,
)


def test_format_score():
    assert formatear_puntaje(NO_CALIFICADO) == "N/P"
    assert formatear_puntaje(Calificado(0.0)) == "0"
    assert formatear_puntaje(Calificado(12.5), 2) == "12.50"


class TestTabla:
    def test_rows_sorted_by_name(self, instantanea):
        tabla = construir_tabla(instantanea)
        assert [f.estudiante.nombre for f in tabla.filas] == ["Ana", "Beto", "Carla"]

    def test_only_cortes_with_evaluations(self, instantanea):
        tabla = construir_tabla(instantanea)
        assert list(tabla.columnas) == [1, 3]
        assert [c.corte for c in tabla.filas[0].cortes] == [1, 3]

    def test_totals(self, instantanea):
        ana = construir_tabla(instantanea).filas[0]
        assert ana.cortes[0].total == pytest.approx(5.0)
        assert ana.cortes[1].total == pytest.approx(7.2)
        assert ana.nota_final == pytest.approx(12.2)

    def test_ungraded_distinct_from_zero(self, instantanea):
        beto = construir_tabla(instantanea).filas[1]
        celdas = {c.evaluacion_id: c.puntaje for c in beto.cortes[0].celdas}
        assert celdas["q1"] == Calificado(0.0)
        assert celdas["p1"] is NO_CALIFICADO


class TestReporte:
    def test_general_uses_final_grades(self, instantanea):
        reporte = construir_reporte(instantanea)
        general = reporte.general
        assert general.promedio == 6.33
        assert general.nota_mas_alta == 12.2
        assert general.nota_mas_baja == 2.8
        assert general.aprobados == 1
        assert general.tasa_aprobacion == 33.33
        assert general.distribucion == [1, 1, 0, 1, 0]

    def test_corte_stats_are_normalized(self, instantanea):
        reporte = construir_reporte(instantanea)
        assert [n for n, _ in reporte.cortes[1].estudiantes_aprobados] == ["Ana"]
        assert reporte.cortes[1].nota_mas_alta == 16.67
        assert reporte.cortes[3].aprobados == 2
        assert reporte.cortes[3].tasa_aprobacion == 66.67

    def test_empty_corte_has_zero_stats(self, instantanea):
        reporte = construir_reporte(instantanea)
        assert reporte.cortes[2].promedio == 0
        assert reporte.cortes[2].distribucion == [0, 0, 0, 0, 0]

    def test_evaluation_stats_skip_ungraded(self, instantanea):
        reporte = construir_reporte(instantanea)
        por_id = {e.evaluacion.id: e for e in reporte.evaluaciones}
        assert [e.evaluacion.id for e in reporte.evaluaciones] == ["p1", "q1", "f3"]
        assert por_id["q1"].sin_calificar == 0
        assert por_id["q1"].estadisticas.promedio == 10.67
        assert por_id["p1"].sin_calificar == 1
        assert por_id["p1"].estadisticas.promedio == 11.5
        assert por_id["f3"].estadisticas.aprobados == 2

    def test_custom_passing_grade(self, instantanea):
        reporte = construir_reporte(instantanea, nota_aprobatoria=12.5)
        assert reporte.general.aprobados == 0

    def test_no_students(self):
        vacia = InstantaneaMateria(materia_id="m", nombre="Vacía", periodo="2024-I")
        reporte = construir_reporte(vacia)
        assert reporte.general.promedio == 0
        assert reporte.evaluaciones == []


class TestCsv:
    def test_layout(self, instantanea):
        filas = list(csv.reader(io.StringIO(exportar_csv(instantanea))))
        assert filas[0] == [
            "Cedula",
            "Nombre",
            "Correo",
            "Parcial 1 (20%)",
            "Quiz (10%)",
            "Total Corte 1",
            "Final (40%)",
            "Total Corte 3",
            "Nota Final",
        ]
        assert filas[1] == [
            "V-1", "Ana", "ana@correo.com", "15.00", "20.00", "5.00", "18.00", "7.20", "12.20"
        ]
        # Beto: parcial sin calificar, quiz con cero
        assert filas[2][3:6] == ["N/P", "0.00", "0.00"]
        assert len(filas) == 4

    def test_csv_matches_table(self, instantanea):
        tabla = construir_tabla(instantanea)
        filas = list(csv.reader(io.StringIO(exportar_csv(instantanea))))[1:]
        for fila_csv, fila in zip(filas, tabla.filas):
            assert fila_csv[-1] == f"{fila.nota_final:.2f}"

    def test_filename(self, instantanea):
        assert nombre_archivo_csv(instantanea) == "calificaciones_detalladas_Física_General.csv"


class TestCorreos:
    def test_by_evaluation(self, instantanea):
        borrador = correo_por_evaluacion(instantanea, "p1")
        assert borrador.asunto == "Calificaciones: Parcial 1 - Física General"
        assert "Ana: 15\n" in borrador.cuerpo
        assert "Beto: N/P\n" in borrador.cuerpo
        assert borrador.destinatarios == ["ana@correo.com", "carla@correo.com"]
        assert borrador.mailto.startswith("mailto:?bcc=ana@correo.com,carla@correo.com&subject=")

    def test_unknown_evaluation(self, instantanea):
        with pytest.raises(NoEncontrado):
            correo_por_evaluacion(instantanea, "nope")

    def test_by_corte_uses_weighted_sum(self, instantanea):
        borrador = correo_por_corte(instantanea, 1)
        assert borrador.asunto == "Calificaciones Finales del Corte 1 - Física General"
        assert "Ana: 5.00\n" in borrador.cuerpo
        assert "Carla: 2.80\n" in borrador.cuerpo
        assert borrador.cuerpo.endswith("Saludos.")

    def test_empty_corte(self, instantanea):
        with pytest.raises(CorteSinEvaluaciones):
            correo_por_corte(instantanea, 2)


class TestImportacionCsv:
    def test_parse(self):
        texto = "cedula,nombre,correo\nV-1, Ana ,ana@correo.com\n\nV-2,Beto,beto@correo.com\n"
        estudiantes = parsear_csv_estudiantes(texto)
        assert [(e.id, e.nombre) for e in estudiantes] == [("V-1", "Ana"), ("V-2", "Beto")]

    @pytest.mark.parametrize("texto", ["", "cedula,nombre,correo\n", "\n\n"])
    def test_empty_file(self, texto):
        with pytest.raises(ErrorImportacion):
            parsear_csv_estudiantes(texto)

    def test_missing_fields_reports_line(self):
        texto = "cedula,nombre,correo\nV-1,Ana,ana@correo.com\nV-2,Beto\n"
        with pytest.raises(ErrorImportacion) as exc:
            parsear_csv_estudiantes(texto)
        assert "línea 3" in exc.value.mensaje
