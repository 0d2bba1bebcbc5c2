"""Tests for ParameterSet validation."""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from flow2docker.build.params import ParameterSet, Toolchain, split_modules
from flow2docker.core.errors import ErrorCategory, InvalidParameterError


class TestSplitModules:
    def test_comma_separated_string(self):
        assert split_modules("adams-core, adams-weka,,") == ["adams-core", "adams-weka"]

    def test_list_with_embedded_commas(self):
        assert split_modules(["adams-core,adams-weka", "adams-groovy"]) == [
            "adams-core",
            "adams-weka",
            "adams-groovy",
        ]

    def test_none(self):
        assert split_modules(None) == []


class TestParameterSetValid:
    def test_required_fields(self, make_params, workflow_file, output_dir):
        params = make_params()
        assert params.modules == ("adams-core", "adams-weka")
        assert params.version == "20.1.1"
        assert params.workflow == workflow_file
        assert params.base_image == "openjdk:11-jdk-slim-buster"
        assert params.output_dir == output_dir

    def test_optional_fields_default_to_unset(self, make_params):
        params = make_params()
        assert params.dependencies == ()
        assert params.dependency_files == ()
        assert params.external_jars == ()
        assert params.jvm_options == ()
        assert params.instructions is None
        assert params.toolchain == Toolchain()

    def test_none_optionals_treated_as_unset(self, make_params):
        params = make_params(dependencies=None, jvm_options=None, toolchain=None)
        assert params.dependencies == ()
        assert params.jvm_options == ()
        assert params.toolchain.java_home is None

    def test_jvm_options_keep_order(self, make_params):
        params = make_params(jvm_options=["-Xmx2g", "-Dfoo=bar"])
        assert params.jvm_options == ("-Xmx2g", "-Dfoo=bar")

    def test_frozen(self, make_params):
        params = make_params()
        with pytest.raises(ValidationError):
            params.version = "other"  # type: ignore[misc]


class TestParameterSetInvalid:
    @pytest.mark.parametrize("modules", [None, "", " , ", []])
    def test_missing_modules(self, make_params, modules):
        with pytest.raises(InvalidParameterError) as exc_info:
            make_params(modules=modules)
        assert exc_info.value.field == "modules"
        assert exc_info.value.category == ErrorCategory.VALIDATION

    @pytest.mark.parametrize("version", [None, "", "   "])
    def test_missing_version(self, make_params, version):
        with pytest.raises(InvalidParameterError) as exc_info:
            make_params(version=version)
        assert exc_info.value.field == "version"

    def test_missing_workflow_file(self, make_params, tmp_path):
        missing = tmp_path / "nope.flow"
        with pytest.raises(InvalidParameterError) as exc_info:
            make_params(workflow=missing)
        assert exc_info.value.field == "workflow"
        assert str(missing) in exc_info.value.message

    def test_workflow_is_directory(self, make_params, tmp_path):
        with pytest.raises(InvalidParameterError) as exc_info:
            make_params(workflow=tmp_path)
        assert exc_info.value.field == "workflow"

    @pytest.mark.parametrize("image", [None, "", "  "])
    def test_missing_base_image(self, make_params, image):
        with pytest.raises(InvalidParameterError) as exc_info:
            make_params(base_image=image)
        assert exc_info.value.field == "base_image"

    def test_output_dir_missing(self, make_params, tmp_path):
        with pytest.raises(InvalidParameterError) as exc_info:
            make_params(output_dir=tmp_path / "absent")
        assert exc_info.value.field == "output_dir"

    def test_output_dir_is_file(self, make_params, workflow_file):
        with pytest.raises(InvalidParameterError) as exc_info:
            make_params(output_dir=workflow_file)
        assert exc_info.value.field == "output_dir"

    def test_output_dir_access_denied(self, make_params, output_dir: Path):
        with patch("flow2docker.build.params.os.access", return_value=False) as mock_access:
            with pytest.raises(InvalidParameterError) as exc_info:
                make_params(output_dir=output_dir)
        assert exc_info.value.field == "output_dir"
        assert "not writable" in exc_info.value.message
        mock_access.assert_called_once_with(output_dir, os.W_OK)

    @pytest.mark.skipif(os.name == "nt" or os.geteuid() == 0, reason="needs POSIX permissions as non-root")
    def test_output_dir_not_writable(self, make_params, output_dir: Path):
        output_dir.chmod(0o500)
        try:
            with pytest.raises(InvalidParameterError) as exc_info:
                make_params(output_dir=output_dir)
            assert exc_info.value.field == "output_dir"
        finally:
            output_dir.chmod(0o700)


class TestValidationPriority:
    """The first invalid field in priority order is reported."""

    def test_modules_before_everything(self, tmp_path):
        with pytest.raises(InvalidParameterError) as exc_info:
            ParameterSet(modules="", version="", workflow=tmp_path / "x", base_image="", output_dir=None)
        assert exc_info.value.field == "modules"

    def test_version_before_workflow(self, tmp_path):
        with pytest.raises(InvalidParameterError) as exc_info:
            ParameterSet(modules="a", version="", workflow=tmp_path / "x", base_image="", output_dir=None)
        assert exc_info.value.field == "version"

    def test_workflow_before_base_image(self, tmp_path):
        with pytest.raises(InvalidParameterError) as exc_info:
            ParameterSet(modules="a", version="1", workflow=tmp_path / "x", base_image="", output_dir=None)
        assert exc_info.value.field == "workflow"

    def test_base_image_before_output_dir(self, workflow_file):
        with pytest.raises(InvalidParameterError) as exc_info:
            ParameterSet(modules="a", version="1", workflow=workflow_file, base_image="", output_dir=None)
        assert exc_info.value.field == "base_image"

    def test_instructions_file_not_validated(self, make_params, tmp_path):
        params = make_params(instructions=tmp_path / "missing.txt")
        assert params.instructions == tmp_path / "missing.txt"
