import typing as t

import pydantic as p


class BaseModel(p.BaseModel):
    @classmethod
    def from_row(cls, row: t.Mapping[str, t.Any]) -> t.Self:
        """Build a model from a result row's mapping, validating column values"""
        return cls.model_validate(dict(row))
