import pytest
from cubspline import utils, UnsupportedSplineTypeError


def test_read_config(tmp_path):
    fname = tmp_path / 'conf.yaml'
    fname.write_text('spline_type: monotonic\nnpoints: 20\n')
    config = utils.read_config(str(fname))
    assert config['spline_type'] == 'monotonic'
    assert config['npoints'] == 20
    assert config['sort_inputs'] is False
    assert config['extrapolate'] is True
    config = utils.read_config(str(fname),
                               override_options={'npoints': 5})
    assert config['npoints'] == 5


def test_missing_config(tmp_path, monkeypatch):
    with pytest.raises(RuntimeError):
        utils.read_config(str(tmp_path / 'xx.yaml'))
    monkeypatch.chdir(tmp_path)
    config = utils.read_config()
    for k, v in utils.get_default_config().items():
        assert config[k] == v


def test_empty_config(tmp_path):
    fname = tmp_path / 'empty.yaml'
    fname.write_text('')
    config = utils.read_config(str(fname))
    assert config['spline_type'] == 'natural'


def test_frozen(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    config = utils.read_config(override_options={'npoints': 7})
    assert config['npoints'] == 7
    with pytest.raises(TypeError):
        config['npoints'] = 4


def test_unknown_options(tmp_path, caplog):
    fname = tmp_path / 'conf.yaml'
    fname.write_text('spline_type: periodic\nsmoothing: 3\n')
    config = utils.read_config(str(fname))
    assert 'smoothing' not in config
    assert config['spline_type'] == 'periodic'
    assert 'smoothing' in caplog.text


def test_bad_spline_type(tmp_path):
    fname = tmp_path / 'conf.yaml'
    fname.write_text('spline_type: akima\n')
    with pytest.raises(UnsupportedSplineTypeError):
        utils.read_config(str(fname))
    with pytest.raises(UnsupportedSplineTypeError):
        utils.read_config(str(fname), override_options={'spline_type': 'x'})
    fname.write_text('- natural\n')
    with pytest.raises(RuntimeError):
        utils.read_config(str(fname))
