"""
Template deck used when the model's script cannot be recovered.
"""

from ....models import PPTScript, Slide

_BOARD = "疯狂动物城风格教学插图，迪士尼皮克斯画质：画面以绿色大黑板为核心，占据画面90%以上，"
_TEACHER = "朱迪兔子老师只在画面边缘简单出现，没有其他动物角色"


def build_template_script(knowledge_point: str, summary: str) -> PPTScript:
    """Five fixed slides: opening, explanation, analysis, example, recap."""
    knowledge_point = knowledge_point.strip() or "课堂知识点"
    slides = [
        Slide(
            title=knowledge_point,
            script=f"课上这个{knowledge_point}你没太听懂是吧，没关系，我来给你讲讲。咱们一起把这个知识点搞清楚。",
            image_prompt=f"{_BOARD}黑板上用粉笔清晰写着大标题\"{knowledge_point}\"（中文），下面列出本节课要复习的重点和要点。{_TEACHER}",
            subtitle=f"复习：{knowledge_point}",
        ),
        Slide(
            title="知识讲解",
            script=summary or f"让我们来回顾一下{knowledge_point}的基本概念和核心内容。首先，我们需要理解它的定义和基本特征。",
            image_prompt=f"{_BOARD}黑板上用粉笔清晰写着\"{knowledge_point}\"的定义、特征和核心要点（中文），旁边画着示意图和标注。{_TEACHER}",
            subtitle="核心概念",
        ),
        Slide(
            title="详细解析",
            script=f"接下来，我们深入分析{knowledge_point}的具体内容和应用方法。让我们逐步理解其中的关键要素。",
            image_prompt=f"{_BOARD}黑板上详细列出{knowledge_point}的各个要素、步骤或分类（中文），用粉笔清晰标注。{_TEACHER}",
            subtitle="深入理解",
        ),
        Slide(
            title="举例说明",
            script=f"为了更好地理解{knowledge_point}，我们来看一些具体的例子。这些例子可以帮助我们掌握这个概念的实际应用。",
            image_prompt=f"{_BOARD}黑板上画着具体的例子和解题步骤（中文），用粉笔清晰标注。{_TEACHER}",
            subtitle="实例分析",
        ),
        Slide(
            title="课堂小结",
            script=f"好了，{knowledge_point}的主要内容就是这些。现在应该清楚多了吧？有什么不明白的随时问我哈。",
            image_prompt=f"{_BOARD}黑板上画着知识点总结的思维导图或要点列表（中文），中心是\"{knowledge_point}\"，周围连接着关键内容。{_TEACHER}",
            subtitle=f"{knowledge_point} - 总结回顾",
        ),
    ]
    return PPTScript(slides=slides, from_template=True)
