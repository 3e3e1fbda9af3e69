"""增强管道: 配置构造、导出往返与预设。"""

from __future__ import annotations

import pytest
import torch
import yaml

from augkit import (
    CenterCrop,
    Identity,
    Image,
    Keypoints,
    OneOf,
    RandomApply,
    RandomHorizontalFlip,
    Sequence,
    apply,
    build_pipeline,
    build_transform,
    compose,
    pipeline_from_config,
    pipeline_to_config,
)
from augkit.augmentation.pipeline import PRESETS


NESTED_CONFIG = [
    {"class": "RandomResizedCrop", "params": {"output_size": [32, 32], "seed": 3}},
    {"class": "RandomHorizontalFlip", "params": {"p": 0.5}},
    {
        "class": "RandomApply",
        "params": {"p": 0.8},
        "transform": {
            "class": "OneOf",
            "params": {"weights": [1.0, 2.0]},
            "transforms": [
                {"class": "RandomBrightness", "params": {"max_delta": 0.4}},
                {"class": "RandomContrast", "params": {"contrast_range": [0.5, 1.5]}},
            ],
        },
    },
    {"class": "GaussianNoise", "params": {"std": 0.05}},
]


class TestBuild:
    def test_single_transform(self) -> None:
        tfm = build_transform({"class": "RandomHorizontalFlip", "params": {"p": 0.3}})
        assert isinstance(tfm, RandomHorizontalFlip)
        assert tfm.p == pytest.approx(0.3)

    def test_nested_config(self) -> None:
        pipeline = build_pipeline(NESTED_CONFIG)
        assert isinstance(pipeline, Sequence)
        assert len(pipeline) == 4
        wrapper = pipeline.transforms[2]
        assert isinstance(wrapper, RandomApply)
        assert isinstance(wrapper.transform, OneOf)
        assert wrapper.transform.weights == [1.0, 2.0]
        assert pipeline.transforms[0].seed == 3

    def test_single_entry_is_not_wrapped(self) -> None:
        pipeline = build_pipeline([{"class": "CenterCrop", "params": {}}])
        assert isinstance(pipeline, CenterCrop)

    def test_empty_list_is_identity(self) -> None:
        assert isinstance(build_pipeline([]), Identity)

    def test_sequence_entry_is_flattened(self) -> None:
        config = {"class": "Sequence", "transforms": NESTED_CONFIG[:2]}
        pipeline = build_pipeline([config, NESTED_CONFIG[3]])
        assert len(pipeline) == 3

    def test_unknown_class(self) -> None:
        with pytest.raises(ValueError, match="Rotate"):
            build_transform({"class": "Rotate", "params": {}})

    def test_custom_registry(self) -> None:
        registry = {"Flip": RandomHorizontalFlip}
        assert isinstance(build_transform({"class": "Flip", "params": {}}, registry), RandomHorizontalFlip)


class TestExport:
    def test_round_trip(self) -> None:
        exported = pipeline_to_config(build_pipeline(NESTED_CONFIG))
        assert pipeline_to_config(build_pipeline(exported)) == exported

    def test_round_trip_through_yaml(self) -> None:
        exported = pipeline_to_config(build_pipeline(NESTED_CONFIG))
        loaded = yaml.safe_load(yaml.safe_dump(exported))
        assert loaded == exported
        assert pipeline_to_config(build_pipeline(loaded)) == exported

    def test_identity_exports_empty_list(self) -> None:
        assert pipeline_to_config(Identity()) == []

    def test_single_transform_exports_list(self) -> None:
        exported = pipeline_to_config(RandomHorizontalFlip(p=0.2))
        assert exported == [{"class": "RandomHorizontalFlip", "params": {"p": 0.2}}]

    def test_seed_only_exported_when_set(self) -> None:
        assert "seed" not in RandomHorizontalFlip().to_config()["params"]
        assert RandomHorizontalFlip(seed=9).to_config()["params"]["seed"] == 9

    def test_sequence_config(self) -> None:
        config = compose(RandomHorizontalFlip(), Identity(), CenterCrop()).to_config()
        assert config["class"] == "Sequence"
        assert [c["class"] for c in config["transforms"]] == ["RandomHorizontalFlip", "CenterCrop"]


class TestPresets:
    @pytest.mark.parametrize("name", sorted(PRESETS))
    def test_preset_output_size(self, name: str) -> None:
        pipeline = PRESETS[name]((24, 24))
        image = Image(torch.rand(3, 40, 48))
        kp = Keypoints(torch.tensor([[10.0, 12.0]]), bounds=(40, 48))
        out_image, out_kp = apply(pipeline, (image, kp))
        assert out_image.size == (24, 24)
        assert out_kp.bounds == (24, 24)
        assert out_image.data.min() >= 0.0 and out_image.data.max() <= 1.0

    @pytest.mark.parametrize("name", sorted(PRESETS))
    def test_preset_is_serialisable(self, name: str) -> None:
        exported = pipeline_to_config(PRESETS[name]((24, 24)))
        assert yaml.safe_load(yaml.safe_dump(exported)) == exported


class TestPipelineFromConfig:
    def test_preset_section(self) -> None:
        pipeline = pipeline_from_config({"preset": "strong", "image_size": [16, 16], "transforms": []})
        assert isinstance(pipeline, Sequence)
        assert pipeline_to_config(pipeline) == pipeline_to_config(PRESETS["strong"]((16, 16)))

    def test_explicit_transforms_take_precedence(self) -> None:
        pipeline = pipeline_from_config({"preset": "strong", "transforms": NESTED_CONFIG})
        assert pipeline_to_config(pipeline) == pipeline_to_config(build_pipeline(NESTED_CONFIG))

    def test_unknown_preset(self) -> None:
        with pytest.raises(ValueError, match="未知的增强预设"):
            pipeline_from_config({"preset": "extreme"})
