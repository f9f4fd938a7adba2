import re
from pydantic import BaseModel, ConfigDict, field_validator
from typing import Optional
from datetime import datetime

PATRON_CORREO = re.compile(r"^\S+@\S+\.\S+$")


def _validar_correo(valor: str) -> str:
    if not PATRON_CORREO.match(valor):
        raise ValueError("Por favor, introduce un correo electrónico válido.")
    return valor


class EstudianteBase(BaseModel):
    id: str  # Cédula
    nombre: str
    correo: str

    @field_validator("id", "nombre", "correo")
    @classmethod
    def requerido(cls, valor: str) -> str:
        valor = valor.strip()
        if not valor:
            raise ValueError("Todos los campos son obligatorios.")
        return valor

    @field_validator("correo")
    @classmethod
    def correo_valido(cls, valor: str) -> str:
        return _validar_correo(valor)


class EstudianteCreate(EstudianteBase):
    pass


class EstudianteUpdate(BaseModel):
    nombre: Optional[str] = None
    correo: Optional[str] = None

    @field_validator("correo")
    @classmethod
    def correo_valido(cls, valor: Optional[str]) -> Optional[str]:
        return None if valor is None else _validar_correo(valor.strip())


class Estudiante(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    nombre: str
    correo: str

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ResultadoImportacion(BaseModel):
    cargados: int
    inscritos: int
    mensaje: str
