import os
from pathlib import Path

import yaml
from pydantic import BaseModel

JSON_SUFFIXES = (".json",)
YAML_SUFFIXES = (".yaml", ".yml")


def _check_suffix(file_path: Path) -> None:
    if file_path.suffix not in JSON_SUFFIXES + YAML_SUFFIXES:
        raise ValueError(f"Unsupported file type: {file_path}")


class ConfigBase(BaseModel):

    @classmethod
    def load_config(cls, file_path: Path):
        """加载配置文件, 文件不存在时返回默认配置

        格式错误 (JSON/YAML 语法或字段校验) 统一抛出 ValueError
        """
        _check_suffix(file_path)
        if not file_path.exists():
            return cls()
        content: str = file_path.read_text(encoding="utf-8")
        if file_path.suffix in JSON_SUFFIXES:
            return cls.model_validate_json(content)
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ValueError(f"YAML 格式错误: {e}") from e
        return cls.model_validate(data or {})

    def dump_config(self, file_path: Path) -> None:
        """保存配置文件

        先写入同目录下的临时文件再替换, 写入失败时原文件保持不变
        """
        _check_suffix(file_path)
        if file_path.suffix in JSON_SUFFIXES:
            content = self.model_dump_json(indent=2)
        else:
            content = yaml.dump(
                data=self.model_dump(),
                default_flow_style=False,
                sort_keys=False,
                allow_unicode=True,
            )
        file_path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = file_path.with_name(f".{file_path.name}.tmp")
        try:
            temp_path.write_text(content, encoding="utf-8")
            os.replace(temp_path, file_path)
        finally:
            if temp_path.exists():
                temp_path.unlink()

    @classmethod
    def get_field_description(cls, field_name: str) -> str:
        """获取字段说明, 用作命令行帮助文本"""
        field = cls.model_fields.get(field_name)
        return (field.description or "") if field else ""
