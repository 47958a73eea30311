"""
Tests for configuration, the protocol registry and the execution context.
"""

import dataclasses

import pytest
import torch

from fake_engine import FakeEngine

from aby3_ops.aby3.operators import Aby3Operators
from aby3_ops.context import MpcComponents, MpcContext, TorchTensorFactory
from aby3_ops.errors import ConfigurationError
from aby3_ops.interfaces import Tensor
from aby3_ops.factory import (
    Aby3Settings,
    FactoryConfig,
    ProtocolFactory,
    available_protocols,
    register_protocol,
)


class TestFactoryConfig:
    def test_defaults(self):
        cfg = FactoryConfig()
        assert cfg.scaling_factor == 16
        assert cfg.protocol == "aby3"
        assert cfg.device is None
        assert cfg.check_reveal is True

    @pytest.mark.parametrize("F", [0, 63])
    def test_invalid_scaling_factor(self, F):
        with pytest.raises(ConfigurationError):
            FactoryConfig(scaling_factor=F)

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("ABY3_SCALING_FACTOR", "20")
        monkeypatch.setenv("ABY3_PROTOCOL", "ABY3")
        monkeypatch.setenv("ABY3_CHECK_REVEAL", "false")
        cfg = FactoryConfig.from_env()
        assert cfg.scaling_factor == 20
        assert cfg.protocol == "ABY3"
        assert cfg.check_reveal is False

    def test_from_env_defaults(self, monkeypatch):
        for name in ("SCALING_FACTOR", "PROTOCOL", "DEVICE", "CHECK_REVEAL"):
            monkeypatch.delenv("ABY3_" + name, raising=False)
        assert FactoryConfig.from_env() == FactoryConfig()

    def test_from_env_rejects_garbage(self, monkeypatch):
        monkeypatch.setenv("ABY3_SCALING_FACTOR", "sixteen")
        with pytest.raises(ConfigurationError):
            FactoryConfig.from_env()

    @pytest.mark.parametrize("value", ["ture", "", "enabled"])
    def test_from_env_rejects_malformed_check_reveal(self, monkeypatch, value):
        """typo を黙って False 扱いにしない"""
        monkeypatch.setenv("ABY3_CHECK_REVEAL", value)
        with pytest.raises(ConfigurationError):
            FactoryConfig.from_env()

    @pytest.mark.parametrize("value", ["0", "99"])
    def test_from_env_rejects_out_of_range_scaling_factor(self, monkeypatch, value):
        monkeypatch.setenv("ABY3_SCALING_FACTOR", value)
        with pytest.raises(ConfigurationError):
            FactoryConfig.from_env()

    @pytest.mark.parametrize("value, expected", [("1", True), ("no", False), ("TRUE", True)])
    def test_from_env_check_reveal_spellings(self, monkeypatch, value, expected):
        monkeypatch.setenv("ABY3_CHECK_REVEAL", value)
        assert FactoryConfig.from_env().check_reveal is expected

    def test_settings_model(self, monkeypatch):
        monkeypatch.setenv("ABY3_DEVICE", "cpu")
        monkeypatch.setenv("ABY3_SCALING_FACTOR", "12")
        s = Aby3Settings()
        assert s.device == "cpu"
        assert s.scaling_factor == 12


class TestProtocolRegistry:
    def test_aby3_registered(self):
        assert "aby3" in available_protocols()

    def test_unknown_protocol(self):
        with pytest.raises(ConfigurationError):
            ProtocolFactory(FactoryConfig(protocol="spdz")).build(FakeEngine(), party_id=0)

    def test_register_custom_protocol(self):
        seen = {}

        def builder(comps, cfg):
            seen["F"] = comps.codec.scaling_factor
            return Aby3Operators(codec=comps.codec, tensor_factory=comps.tensor_factory)

        register_protocol("aby3-test", builder)
        ctx = ProtocolFactory(FactoryConfig(protocol="aby3-test", scaling_factor=12)).build(
            FakeEngine(scaling_factor=12), party_id=2)
        assert ctx.protocol == "aby3-test"
        assert seen["F"] == 12


class TestContext:
    def test_build(self):
        ctx = ProtocolFactory().build(FakeEngine(), party_id=1)
        assert isinstance(ctx, MpcContext)
        assert isinstance(ctx.operators, Aby3Operators)
        assert ctx.party_id == 1
        assert ctx.scaling_factor == 16
        assert "party_id=1" in repr(ctx)

    def test_engine_reached_through_codec(self, engine):
        ctx = ProtocolFactory().build(engine, party_id=0)
        assert ctx.c.codec.engine is engine
        assert [f.name for f in dataclasses.fields(MpcComponents)] == ["codec", "tensor_factory"]

    @pytest.mark.parametrize("party", [-1, 3])
    def test_rejects_party_outside_three(self, party):
        with pytest.raises(ConfigurationError):
            ProtocolFactory().build(FakeEngine(), party_id=party)

    def test_buffers(self, ctx):
        shared = ctx.empty_shared((3, 4))
        plain = ctx.empty_plain((3,))
        assert shared.shape == (2, 3, 4)
        assert plain.shape == (3,)
        assert shared.dtype == plain.dtype == torch.int64

    def test_independent_instances(self):
        a = ProtocolFactory(FactoryConfig(scaling_factor=8)).build(FakeEngine(scaling_factor=8), party_id=0)
        b = ProtocolFactory(FactoryConfig(scaling_factor=24)).build(FakeEngine(scaling_factor=24), party_id=0)
        assert a.c.codec.encode_constant(1.0, (1,)).item() == 256
        assert b.c.codec.encode_constant(1.0, (1,)).item() == 2 ** 24


class TestTorchTensorFactory:
    def test_fresh_zero_buffers(self):
        f = TorchTensorFactory()
        a = f.create_int64((2, 3))
        b = f.create_int64((2, 3))
        assert a.dtype == torch.int64
        assert bool((a == 0).all())
        assert a.data_ptr() != b.data_ptr()
        assert a.device.type == "cpu"

    def test_buffers_are_torch_tensors(self):
        a = TorchTensorFactory().create_int64((4,))
        assert Tensor is torch.Tensor
        assert isinstance(a, Tensor)
