"""
Prompt模板管理器
负责加载、渲染和管理所有AI交互的提示词模板
"""

from pathlib import Path
from typing import Dict, Any, Optional

import yaml
from jinja2 import Template

from storyshop.core.log_utils import get_logger

logger = get_logger(__name__)


class PromptManager:
    """
    Prompt模板管理器

    模板按类别存放在子目录中，每个 .yml 文件是一个模板，
    包含 user_prompt（jinja2 模板）以及 description、version 等元数据。
    """

    def __init__(self, prompts_dir: Optional[Path] = None):
        """初始化prompt管理器"""
        self.prompts_dir = prompts_dir or Path(__file__).parent
        self._templates_cache: Dict[str, Dict[str, Any]] = {}
        self._load_all_templates()

    def _load_all_templates(self):
        """加载所有模板文件，格式错误的文件直接抛出异常"""
        for category_dir in sorted(self.prompts_dir.iterdir()):
            if not category_dir.is_dir() or category_dir.name.startswith('__'):
                continue

            templates = {}
            for template_file in sorted(category_dir.glob('*.yml')):
                with open(template_file, 'r', encoding='utf-8') as f:
                    templates[template_file.stem] = yaml.safe_load(f) or {}
            self._templates_cache[category_dir.name] = templates

        logger.debug(
            "Prompt模板加载完成",
            operation="prompt_templates_loaded",
            categories=list(self._templates_cache.keys())
        )

    def get_template(self, category: str, template_name: str) -> Optional[Dict[str, Any]]:
        """获取指定模板"""
        return self._templates_cache.get(category, {}).get(template_name)

    def render_user_prompt(self, category: str, template_name: str, **kwargs) -> str:
        """渲染用户提示词，结果去掉首尾空白"""
        template_data = self.get_template(category, template_name)
        if not template_data:
            raise ValueError(f"模板不存在: {category}/{template_name}")

        user_prompt = template_data.get('user_prompt', '')
        if not user_prompt:
            raise ValueError(f"模板中未找到user_prompt: {category}/{template_name}")

        return Template(user_prompt).render(**kwargs).strip()

    def list_templates(self) -> Dict[str, list]:
        """列出所有可用的模板"""
        return {
            category: list(templates.keys())
            for category, templates in self._templates_cache.items()
        }


# 全局prompt管理器实例
prompt_manager = PromptManager()


def get_prompt_manager() -> PromptManager:
    """获取prompt管理器实例"""
    return prompt_manager
