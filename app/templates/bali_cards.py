"""
Static cards for the Bali real-estate bot.

Copy lives here as data; layout comes from build_info_bubble() so every card
shares the same look.
"""
from app.domain.actions import AREA_POSTBACK_KEY
from app.domain.messages import Box, Bubble, FlexMessage, Separator, Text
from app.domain.property import AREA_DISPLAY_NAMES
from app.templates.flex import (
    CardContext,
    build_button,
    build_carousel_message,
    build_info_bubble,
)


def create_bali_info_message(ctx: CardContext) -> FlexMessage:
    """Bali introduction carousel: why Bali is a "paradise with real returns"."""
    bubbles = [
        build_info_bubble(
            'バリ島が"実利のある楽園"と呼ばれる理由',
            title_size="lg",
            hero_url=ctx.static_image("bali-hero.jpg"),
            lead="ただのリゾートではありません。世界中の投資家・富裕層が注目するその背景には、"
                 "圧倒的な「数字による裏付け」があります。",
            sections=[
                ("投資価値のポイント",
                 "• 年間1,600万人規模の観光需要市場\n• 急成長するインドネシア経済の中核\n"
                 "• 政府による観光開発の最優先支援\n• 欧米・中東・ASEAN富裕層の移住先"),
            ],
        ),
        build_info_bubble(
            "人口と成長性",
            sections=[
                ("インドネシア総人口", "約2.8億人（世界第4位）"),
                ("バリ州人口", "約440万人（2024年時点）\n2030年には500万人突破予測\n年成長率：1.2〜1.5%"),
                ("平均年齢：約29歳", "若年層中心の「生産＋消費」両輪成長モデル"),
            ],
            footnote="拡大市場＋若年人口＝経済活性化と長期的需要の保証",
        ),
        build_info_bubble(
            "GDPと経済ポテンシャル",
            sections=[
                ("インドネシアGDP", "約1.6兆ドル（世界16位）\n2050年予測：世界第4位（PwC・IMF）"),
                ("バリ州GDP（2023年）", "約116兆ルピア（≒約1.1兆円）"),
                ("産業構造", "観光業が約54%、現在は不動産・教育・医療分野へも多角化中"),
            ],
            footnote="成長経済 × 多角化＝安定性と投資余地の拡大",
        ),
        build_info_bubble(
            "観光市場の回復と拡大",
            sections=[
                ("訪問外国人観光客数の推移",
                 "2019年（コロナ前）：約630万人（過去最高）\n2020〜2021年：ほぼゼロ（コロナ影響）\n"
                 "2023年：約460万人（急回復）\n2024年（予測）：600万人超（8割回復）"),
                ("インドネシア国内観光客", "年間1,000万人超"),
                ("合計観光需要市場", "約1,600万人規模"),
            ],
            footnote='訪問者＝消費者。バリ島は"人が来続ける市場"であり続ける。',
        ),
        build_info_bubble(
            "世界的観光都市 × 安定的な資本流入",
            title_size="lg",
            sections=[
                ("年間1,000万人超が訪れるアジア最大級の観光島",
                 "欧米・中東・ASEANの富裕層・ノマド・FIRE層が滞在・移住"),
                ("政府支援", "政府もインフラ・観光開発を最優先で支援中"),
                ("投資環境の特徴",
                 "• 年間を通じて温暖な気候\n• 国際的な観光地としての地位\n• 成長する不動産市場\n"
                 "• 豊かな文化と伝統\n• 英語が通じる環境"),
            ],
            footnote="観光＝消費が絶え間なく流れ込む、資本流入型マーケット",
        ),
    ]
    return build_carousel_message('バリ島の紹介 - "実利のある楽園"', bubbles)


def create_property_area_message(ctx: CardContext) -> FlexMessage:
    """Area picker; each button posts back "area=<code>"."""
    buttons = [
        build_button({"label": name, "data": f"{AREA_POSTBACK_KEY}={code}"})
        for code, name in AREA_DISPLAY_NAMES.items()
    ]
    return FlexMessage(
        alt_text="不動産エリア選択",
        contents=Bubble(
            body=Box(contents=[
                Text("不動産エリア選択", weight="bold", size="xl"),
                Text("ご希望のエリアをお選びください", margin="md"),
            ]),
            footer=Box(contents=buttons, spacing="sm")
        )
    )


def create_investment_message(ctx: CardContext) -> FlexMessage:
    """Investment cases: motorbike and car rental businesses."""
    bubbles = [
        build_info_bubble(
            "Yamaha NMAX バイクレンタル事業",
            title_size="lg",
            subtitle="10台投資案件",
            hero_url=ctx.static_image("bike-rental.jpg"),
            sections=[
                ("基本条件",
                 "• 台数：10台\n• 1台価格：460,000円\n• 総投資額：4,600,000円\n"
                 "• レンタル単価：Rp100,000（約980円/日）\n• 稼働日数：年間240日（20日/月）"),
            ],
        ),
        build_info_bubble(
            "バイク事業 収益シミュレーション",
            title_size="lg",
            sections=[
                ("年間収支",
                 "• 年間売上：2,352,000円\n• 年間経費：1,000,000円\n  （整備・保険：500,000円）\n"
                 "  （運営報酬：500,000円）\n• 年間純利益：1,352,000円"),
                ("投資回収と収益",
                 "• 投資回収年数：約3.4年\n• 10年後残存価値：1,840,000円\n"
                 "• 10年間総リターン：10,763,200円\n• 年平均利回り：約23.4%"),
            ],
        ),
        build_info_bubble(
            "アルファード HEV カーレンタル事業",
            title_size="lg",
            subtitle="高級車レンタル投資案件",
            hero_url=ctx.static_image("car-rental.jpg"),
            sections=[
                ("基本条件",
                 "• 車両購入費：1,500万円（新車アルファード HEV）\n• 稼働日数：年間300日\n"
                 "• 1日あたり貸出価格：20,000円\n• 年間売上：600万円\n• 年間経費：200万円\n"
                 "• 年間純利益：400万円"),
            ],
        ),
        build_info_bubble(
            "車事業 投資パターン①",
            title_size="lg",
            subtitle="1人投資家モデル",
            sections=[
                ("投資詳細",
                 "• 初期投資額：1,500万円\n• 年間純利益：400万円（すべて取得）\n• 投資回収年数：3.75年\n"
                 "• 回収後の利益：2,500万円（6.25年分）\n• 10年後の売却益：600万円\n• 合計リターン：3,100万円"),
            ],
            footnote="実質年利：平均利回り 約20.7%",
        ),
        build_info_bubble(
            "車事業 投資パターン②",
            title_size="lg",
            subtitle="5人投資家モデル",
            sections=[
                ("投資詳細（1人あたり）",
                 "• 初期投資額：300万円\n• 出資比率：投資家グループ75%、運営者25%\n• 年間利益：60万円\n"
                 "• 投資回収年数：5年\n• 回収後の利益：300万円（5年分）\n• 10年後の売却益シェア：90万円"),
                ("合計リターン：390万円", None),
            ],
            footnote="実質年利：平均利回り 約13%",
        ),
        build_info_bubble(
            "投資案件 比較まとめ",
            title_size="lg",
            sections=[
                ("バイク事業（10台）", "投資額：460万円\n年平均利回り：23.4%\n投資回収年数：3.4年"),
                ("車事業（1人投資家）", "投資額：1,500万円\n年平均利回り：20.7%\n投資回収年数：3.75年"),
                ("車事業（5人投資家）", "投資額：300万円/人\n年平均利回り：13%\n投資回収年数：5年"),
            ],
            footnote="詳細はお問い合わせください",
        ),
    ]
    return build_carousel_message("投資案件 - バイク・車レンタル事業", bubbles)


def create_inspection_booking_message(ctx: CardContext) -> FlexMessage:
    """Inspection tour card linking to the external booking form."""
    return FlexMessage(
        alt_text="視察予約",
        contents=Bubble(
            body=Box(contents=[
                Text("物件視察予約", weight="bold", size="xl"),
                Text("バリ島の物件を実際にご覧いただけます", wrap=True, margin="md"),
                Separator(margin="lg"),
                Text("視察内容:", weight="bold", margin="lg"),
                Text(
                    "• 希望エリアの物件案内\n• 現地スタッフによる説明\n• 投資相談\n• 空港送迎サービス",
                    wrap=True, margin="sm"
                ),
            ]),
            footer=Box(contents=[
                build_button({"type": "uri", "label": "予約フォームへ", "uri": ctx.booking_form_url}),
            ])
        )
    )


PARTNER_BANKS = (
    ("Bank Mandiri", "インドネシア最大の国営商業銀行", "bank-mandiri.jpg",
     "個人・法人向けともに広範なサービスを提供。ATMネットワークは国内最多で、クレジットカード発行や"
     "オンラインバンキングも充実しており、利便性が非常に高いです。"),
    ("BRI", "Bank Rakyat Indonesia", "bank-bri.jpg",
     "零細企業支援に特化し、地方農村部への融資が強み。マイクロファイナンスに定評があり、"
     "地方市場で圧倒的な存在感を放つ銀行です。"),
    ("BNI", "Bank Negara Indonesia", "bank-bni.jpg",
     "主に法人・貿易商社向けの金融を得意とし、輸出入取引や為替サービスが充実。特に海外展開支援に強く、"
     "国際業務に精通した企業向けの選択肢として有望です。"),
    ("BTN", "Bank Tabungan Negara", "bank-btn.jpg",
     "住宅ローンにフォーカスした政府系銀行。不動産購入支援に優れており、住宅ローンの手続きや金利面でも"
     "配慮された設計となっています。住宅関連の投資やプロジェクトに関与する際には有力な選択肢です。"),
)


def create_partner_companies_message(ctx: CardContext) -> FlexMessage:
    """Partner banks plus other supporting services."""
    bubbles = [
        build_info_bubble(name, subtitle=subtitle, lead=summary, hero_url=ctx.static_image(image))
        for name, subtitle, image, summary in PARTNER_BANKS
    ]
    bubbles.append(build_info_bubble(
        "💼 その他のサービス",
        subtitle="金融機関以外のサポート",
        lead="• 法律事務所\n• 不動産管理会社\n• 建設会社\n• 会計事務所\n• 投資コンサルティング",
        footnote="詳細はお問い合わせください",
    ))
    return build_carousel_message("提携先企業", bubbles)


def create_company_info_message(ctx: CardContext) -> FlexMessage:
    """Company profile carousel for the development partner."""
    bubbles = [
        build_info_bubble(
            "企業概要",
            subtitle="Ciputra Development",
            hero_url=ctx.static_image("ciputra.png"),
            lead="• 設立：1981年（創業者Ir. Ciputra）\n• 1994年にジャカルタ証券取引所上場\n"
                 "• 事業領域：住宅、商業施設、オフィス、ホテル、ヘルスケアほか",
            sections=[
                ("受賞歴", "「Indonesia's Best Real Estate Developer」\n（Euromoney, 2024）など多数受賞"),
            ],
        ),
        build_info_bubble(
            "強み・特色",
            sections=[
                ("1. 豊富な開発実績", "インドネシア国内33都市で76以上のプロジェクト（マンション、モール、病院等）"),
                ("2. 巨大な資産規模と安定性", "土地開発ストック7,000ha超、2024年収益は約625 MUSD、純利益約2.1 TIDR"),
                ("3. 高評価のブランド力", "海岸リゾート、住宅街から商業拠点まで幅広く、品質と信頼を兼備"),
            ],
        ),
        build_info_bubble(
            "バリ島開発",
            subtitle="Ciputra Beach Resort",
            sections=[
                ("立地・規模", "バリ島タバナン地区の海岸沿い80ha・海岸線1.7km"),
                ("コンセプト", "「luxury beachfront residences」＋持続可能な生活コミュニティ"),
                ("施設構成", "225邸のヴィラ、クラブハウス、プール、フィットネス、森林デッキなどを完備"),
                ("パートナー運営", "5つ星ホテル運営者（Rosewood）による第一フェーズが36haで展開中"),
            ],
        ),
        build_info_bubble(
            "提携メリット",
            sections=[
                ("ブランドシナジー", "シプトラ独自のプレミアムブランドと提携提案により安心・信頼性を確保"),
                ("プロジェクトの巨大規模", "80ha級の海岸沿い大規模開発は他に類を見ず、差別化要素に"),
                ("運営ノウハウと供給力", "Rosewood等運営と、ヴィラからアパートメントまで柔軟な供給形式あり"),
                ("法務・行政リスクが小さい", "上場企業としての透明性と政府との繋がりで信頼性が高い"),
            ],
        ),
    ]
    return build_carousel_message("会社概要 - Ciputra", bubbles)
