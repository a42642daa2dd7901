"""
Planner Studio - 多页手账排版编辑核心

模块结构：
- config/     运行期配置、画布布局表、日志
- models/     数据模型定义（块/页面/文档/导出任务）
- editor/     编辑命令、归约器、月份套页、单写者会话
- pipeline/   导出流水线（链接规划/执行器/任务管理）
- render/     素材库、离屏渲染面、PDF写入
"""

__version__ = "0.1.0"
