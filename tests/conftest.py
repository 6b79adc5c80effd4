import pandas as pd
import pytest

from shift_dashboard.loaders.utils import format_label
from shift_dashboard.models import Observation
from shift_dashboard.registry import TargetRegistry


def make_obs(station: str, when: str, volume: int) -> Observation:
    ts = pd.Timestamp(when)
    return Observation(station=station, timestamp=ts, label=format_label(ts), volume=volume)


@pytest.fixture
def dock_csv():
    return (
        "Data;Hora;Estacao;A;B;C;D;E;Volume\n"
        "01/03/2024;08:00;DOCK1;0;0;0;0;0;50\n"
        "01/03/2024;10:00;DOCK1;0;0;0;0;0;350\n"
    )


@pytest.fixture
def empty_registry():
    return TargetRegistry()


@pytest.fixture
def planning_csv():
    return (
        "\ufeffData;Hora;Estação;Transferência para;Embarque recebido;Descarregado;"
        "Recebido CD de;Total para roteirizar;Em rota;Outros status\n"
        "01/03/2024;06:00;SP01;10;20;30;40;1.200;800;1\n"
        "01/03/2024;06:00;SP02;5;0;0;0;300,7;200;0\n"
        "01/03/2024;10:00;SP01;1;1;1;1;100;100;0\n"
        "02/03/2024;08:00;SP01;0;0;0;0;50;50;0\n"
        "02/03/2024;06:00;SP01;0;0;0;0;10;30;0\n"
    )
